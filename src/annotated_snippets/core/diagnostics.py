"""Diagnostic squiggles and per-symbol diagnostic association.

Squiggles are drawn on the start line only; a diagnostic spanning several
lines is underlined from its start column for its full character length.
"""

from collections.abc import Iterable, Sequence

from annotated_snippets.core.geometry import LINE_HEIGHT, DocumentMode, LineColumnResolver, offset_to_box
from annotated_snippets.models import Diagnostic, PixelBox, SymbolBound

SQUIGGLE_IMAGE = (
    "url(\"data:image/svg+xml,%3Csvg%20xmlns%3D'http%3A%2F%2Fwww.w3.org%2F2000%2Fsvg'%20viewBox%3D'0%200%206%203'"
    "%20enable-background%3D'new%200%200%206%203'%20height%3D'3'%20width%3D'6'%3E%3Cg%20fill%3D'%23f14c4c'%3E"
    "%3Cpolygon%20points%3D'5.5%2C0%202.5%2C3%201.1%2C3%204.1%2C0'%2F%3E%3Cpolygon%20points%3D'4%2C0%206%2C2"
    "%206%2C0.6%205.4%2C0'%2F%3E%3Cpolygon%20points%3D'0%2C2%201%2C3%202.4%2C3%200%2C0.6'%2F%3E%3C%2Fg%3E"
    '%3C%2Fsvg%3E")'
)

SQUIGGLE_STYLE = {
    "background_image": SQUIGGLE_IMAGE,
    "background_repeat": "repeat-x",
    "background_position": "bottom left",
    "pointer_events": "none",
}


def diagnostic_boxes(
    resolver: LineColumnResolver,
    diagnostics: Iterable[Diagnostic],
    mode: DocumentMode,
    line_height: int = LINE_HEIGHT,
) -> list[tuple[Diagnostic, PixelBox]]:
    """Return one underline box per visible diagnostic.

    Diagnostics starting inside the hidden markup-only prefix have no place in
    the rendered snippet and are left out.
    """
    boxes: list[tuple[Diagnostic, PixelBox]] = []
    for diagnostic in diagnostics:
        box = offset_to_box(resolver, diagnostic.start, diagnostic.length, mode, line_height)
        if box.top < 0:
            continue
        boxes.append((diagnostic, box))
    return boxes


def covers(diagnostic: Diagnostic, offset: int) -> bool:
    return diagnostic.start <= offset <= diagnostic.end


def diagnostics_for_symbol(diagnostics: Sequence[Diagnostic], bound: SymbolBound) -> list[Diagnostic]:
    return [diagnostic for diagnostic in diagnostics if covers(diagnostic, bound.start)]


def should_auto_open(symbol_diagnostics: Sequence[Diagnostic], show_errors: bool) -> bool:
    return show_errors and len(symbol_diagnostics) > 0
