"""Composition of tokens, gutter and overlays into one annotated view.

Overlays share the origin of the content padding box. Back to front:
highlight bands, diagnostic squiggles, token text, symbol hover regions.
"""

from collections.abc import Sequence

from annotated_snippets.core.diagnostics import (
    SQUIGGLE_STYLE,
    diagnostic_boxes,
    diagnostics_for_symbol,
    should_auto_open,
)
from annotated_snippets.core.geometry import LINE_HEIGHT
from annotated_snippets.core.pipeline import DiagnosedDocument
from annotated_snippets.core.ranges import line_range_predicate, parse_ranges, zero_based
from annotated_snippets.core.symbols import get_symbol_bounds
from annotated_snippets.core.tokens import render_tokens
from annotated_snippets.models import (
    AnnotatedView,
    GutterRow,
    HeaderRow,
    Overlay,
    PixelBox,
    QuickInfo,
    Theme,
    Token,
)

BAND_Z_INDEX = 0
DIAGNOSTIC_Z_INDEX = 1
TOKEN_Z_INDEX = 2
SYMBOL_Z_INDEX = 3

HIGHLIGHT_BACKGROUND = "#87add726"


def build_gutter(
    line_count: int,
    theme: Theme,
    highlight: str | None = None,
    row: tuple[int, int] | None = None,
) -> list[GutterRow]:
    is_highlighted = line_range_predicate(highlight)
    inactive_color = theme.color("editorLineNumber.foreground")
    active_color = theme.color("editorLineNumber.activeForeground") or inactive_color

    rows: list[GutterRow] = []
    for line_index in range(line_count):
        is_active = row is not None and row[0] <= line_index <= row[1]
        active = is_highlighted(line_index) or is_active
        rows.append(
            GutterRow(
                number=line_index + 1,
                active=active,
                color=active_color if active else inactive_color,
            )
        )
    return rows


def build_highlight_bands(highlight: str | None, width: int, line_height: int = LINE_HEIGHT) -> list[Overlay]:
    overlays: list[Overlay] = []
    for index, (start, end) in enumerate(zero_based(parse_ranges(highlight))):
        overlays.append(
            Overlay(
                kind="highlight-range",
                key=f"highlight-{index}",
                box=PixelBox(top=start * line_height, left=0, width=width, height=(end - start + 1) * line_height),
                z_index=BAND_Z_INDEX,
                style={"width": "100%", "background_color": HIGHLIGHT_BACKGROUND, "pointer_events": "none"},
            )
        )
    return overlays


def build_diagnostic_overlays(document: DiagnosedDocument, line_height: int = LINE_HEIGHT) -> list[Overlay]:
    return [
        Overlay(
            kind="diagnostic",
            key=f"diagnostic-{diagnostic.start}-{index}",
            box=box,
            z_index=DIAGNOSTIC_Z_INDEX,
            style=dict(SQUIGGLE_STYLE),
            diagnostics=[diagnostic],
        )
        for index, (diagnostic, box) in enumerate(
            diagnostic_boxes(document.handle, document.diagnostics, document.mode, line_height)
        )
    ]


def build_symbol_overlays(
    document: DiagnosedDocument,
    show_errors: bool = False,
    line_height: int = LINE_HEIGHT,
) -> list[Overlay]:
    overlays: list[Overlay] = []
    for index, bound in enumerate(get_symbol_bounds(document.handle, document.mode, line_height)):
        symbol_diagnostics = diagnostics_for_symbol(document.diagnostics, bound)
        auto_open = should_auto_open(symbol_diagnostics, show_errors)
        end = bound.start + int(bound.width)
        overlays.append(
            Overlay(
                kind="symbol-hover",
                key=str(index),
                box=bound.box,
                z_index=SYMBOL_Z_INDEX,
                diagnostics=symbol_diagnostics,
                auto_open=auto_open,
                quick_info=QuickInfo(
                    start=bound.start,
                    end=end,
                    text=document.text[bound.start : end],
                    description=document.handle.get_quick_info(bound.start),
                    diagnostics=symbol_diagnostics,
                    is_open=auto_open,
                ),
            )
        )
    return overlays


def container_style(theme: Theme) -> dict[str, str]:
    style = {"color": theme.foreground}
    background = theme.color("editor.background")
    if background:
        style["background_color"] = background
    border = theme.color("contrastBorder")
    if border:
        style["border"] = f"1px solid {border}"
    return style


def _longest_line(tokens: Sequence[Sequence[Token]]) -> int:
    return max((sum(len(token.content) for token in line) for line in tokens), default=0)


def assemble_view(
    tokens: Sequence[Sequence[Token]],
    theme: Theme,
    document: DiagnosedDocument | None = None,
    *,
    filename: str | None = None,
    language: str | None = None,
    value: str | None = None,
    line_numbers: bool = False,
    highlight: str | None = None,
    row: tuple[int, int] | None = None,
    show_errors: bool = False,
    show_filename: bool = False,
    padding: str = "1rem",
    padding_horizontal: str | None = None,
    padding_vertical: str | None = None,
    inline: bool = False,
    class_name: str | None = None,
    line_height: int = LINE_HEIGHT,
) -> AnnotatedView:
    foreground = theme.foreground
    line_count = len(tokens)

    overlays = build_highlight_bands(highlight, _longest_line(tokens), line_height)
    if document is not None:
        overlays.extend(build_diagnostic_overlays(document, line_height))
        overlays.extend(build_symbol_overlays(document, show_errors, line_height))

    return AnnotatedView(
        filename=filename,
        language=language,
        header=HeaderRow(filename=filename, value=value) if show_filename and filename else None,
        gutter=build_gutter(line_count, theme, highlight, row) if line_numbers else None,
        overlays=overlays,
        segments=render_tokens(tokens, foreground),
        line_count=line_count,
        line_height=line_height,
        token_layer=TOKEN_Z_INDEX,
        style=container_style(theme),
        padding_horizontal=padding_horizontal or padding,
        padding_vertical=padding_vertical or padding,
        inline=inline,
        class_name=class_name,
    )
