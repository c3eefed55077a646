import asyncio
from collections.abc import Sequence
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from annotated_snippets.core.render import RenderContext, create_render_context, render_code
from annotated_snippets.models import AnnotatedView

console = Console()


def _get_context() -> RenderContext:
    return create_render_context()


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def _render_view(
    path: str | None,
    code: str | None,
    language: str | None,
    filename: str | None,
    highlight: str | None = None,
    line_numbers: bool = False,
    show_errors: bool = False,
) -> AnnotatedView:
    async def _run() -> AnnotatedView:
        return await render_code(
            _get_context(),
            value=code,
            source=path if code is None else None,
            filename=filename,
            language=language,
            highlight=highlight,
            line_numbers=line_numbers,
            show_errors=show_errors,
        )

    try:
        return asyncio.run(_run())
    except (ValueError, FileNotFoundError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


def render(
    path: Annotated[str | None, typer.Argument(help="Path to a source file.")] = None,
    code: Annotated[str | None, typer.Option(help="Code snippet to render instead of a file.")] = None,
    language: Annotated[str | None, typer.Option(help="Language of the snippet (e.g. ts, tsx, js, python).")] = None,
    filename: Annotated[str | None, typer.Option(help="Virtual filename for the snippet.")] = None,
    highlight: Annotated[str | None, typer.Option(help='Lines to highlight, e.g. "3,5-8".')] = None,
    line_numbers: Annotated[bool, typer.Option(help="Include the line-number gutter.")] = False,
    show_errors: Annotated[bool, typer.Option(help="Open hover panels of symbols with errors.")] = False,
) -> None:
    """Render a snippet and print the annotated view as JSON."""
    view = _render_view(path, code, language, filename, highlight, line_numbers, show_errors)
    console.print_json(view.model_dump_json())


def diagnostics(
    path: Annotated[str | None, typer.Argument(help="Path to a source file.")] = None,
    code: Annotated[str | None, typer.Option(help="Code snippet to check instead of a file.")] = None,
    language: Annotated[str | None, typer.Option(help="Language of the snippet (e.g. ts, tsx, js).")] = None,
) -> None:
    """List the diagnostics drawn over a snippet."""
    view = _render_view(path, code, language, None)
    rows = [
        (int(overlay.box.top // view.line_height) + 1, int(overlay.box.left) + 1, overlay.diagnostics[0].message)
        for overlay in view.overlays_of("diagnostic")
    ]
    _render_table(["line", "column", "message"], rows)
