import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from annotated_snippets.analyzer import TreeSitterProject, TypeDeclarationLoader
from annotated_snippets.config import Settings, load_settings
from annotated_snippets.core.languages import (
    detect_language_from_path,
    is_analyzable,
    is_analyzable_filename,
    normalize_language,
)
from annotated_snippets.core.pipeline import DiagnosedDocument, prepare_document
from annotated_snippets.core.ports.analyzer import DocumentRegistry
from annotated_snippets.core.ports.highlighter import Highlighter
from annotated_snippets.core.theme import default_theme, load_theme
from annotated_snippets.core.view import assemble_view
from annotated_snippets.errors import ConfigurationError
from annotated_snippets.highlighter import PygmentsHighlighter
from annotated_snippets.models import AnnotatedView, Theme

logger = logging.getLogger(__name__)

_filename_ids = itertools.count()


def next_snippet_filename(language: str | None) -> str:
    return f"{next(_filename_ids)}.snippet.{language or 'txt'}"


@dataclass
class RenderContext:
    """Everything a render shares with other renders in the process.

    Create one per process with ``create_render_context`` and pass it to
    every ``render_code`` call.
    """

    registry: DocumentRegistry
    declarations: TypeDeclarationLoader
    settings: Settings = field(default_factory=Settings)
    theme: Theme = field(default_factory=default_theme)
    highlighter_factory: Callable[[Theme], Highlighter] = PygmentsHighlighter


def create_render_context(settings: Settings | None = None) -> RenderContext:
    settings = settings or load_settings()
    registry = TreeSitterProject()
    theme = load_theme(settings.theme_path) if settings.theme_path else default_theme()
    return RenderContext(
        registry=registry,
        declarations=TypeDeclarationLoader(registry, settings.types_path),
        settings=settings,
        theme=theme,
    )


async def prepare_source(
    context: RenderContext, filename: str, text: str, language: str | None
) -> DiagnosedDocument | None:
    """Register ``text`` and run it through import resolution, formatting and diagnosis.

    Returns ``None`` for languages the analyzer does not handle.
    """
    if not is_analyzable(language):
        return None

    # The analyzer picks its grammar from the extension.
    if not is_analyzable_filename(filename):
        filename = f"{filename}.{language}"

    await context.declarations.load()
    handle = context.registry.register(filename, text, overwrite=True)
    return prepare_document(handle, indent_size=context.settings.indent_size)


async def render_code(
    context: RenderContext,
    *,
    value: str | None = None,
    source: str | None = None,
    working_directory: str | None = None,
    filename: str | None = None,
    language: str | None = None,
    line_numbers: bool = False,
    highlight: str | None = None,
    theme: Theme | None = None,
    show_errors: bool = False,
    row: tuple[int, int] | None = None,
    padding: str = "1rem",
    padding_horizontal: str | None = None,
    padding_vertical: str | None = None,
    inline: bool = False,
    class_name: str | None = None,
    show_filename: bool | None = None,
) -> AnnotatedView:
    """Render a code snippet, or a source file, into an annotated view."""
    if (value is None) == (source is None):
        raise ConfigurationError("Exactly one of 'value' or 'source' must be provided.")

    resolved_language = normalize_language(language)
    if source is not None:
        source_path = Path(working_directory or "") / source
        try:
            text = source_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FileNotFoundError(f"Source file not found: {source_path}") from None
        resolved_language = detect_language_from_path(source_path)
        resolved_filename = source
    else:
        assert value is not None
        text = value
        resolved_filename = filename or next_snippet_filename(resolved_language)

    theme = theme or context.theme
    theme.require_color("editor.foreground")
    document = await prepare_source(context, resolved_filename, text, resolved_language)
    tokens = await context.highlighter_factory(theme).highlight(text, resolved_language, document)

    if show_filename is None:
        show_filename = source is not None or filename is not None

    logger.debug(
        "Rendered %s (%s): %d line(s), %d diagnostic(s)",
        resolved_filename,
        resolved_language,
        len(tokens),
        len(document.diagnostics) if document else 0,
    )
    return assemble_view(
        tokens,
        theme,
        document,
        filename=resolved_filename,
        language=resolved_language,
        value=text,
        line_numbers=line_numbers,
        highlight=highlight,
        row=row,
        show_errors=show_errors,
        show_filename=show_filename,
        padding=padding,
        padding_horizontal=padding_horizontal,
        padding_vertical=padding_vertical,
        inline=inline,
        class_name=class_name,
        line_height=context.settings.line_height,
    )
