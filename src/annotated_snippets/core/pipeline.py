"""Staged preparation of a registered document.

Import resolution and reformatting both rewrite the document text, so
diagnostics are only reachable from the last stage. Each stage is produced
by the previous one, which fixes the order at the type level.
"""

import logging
from dataclasses import dataclass

from annotated_snippets.core.geometry import DocumentMode, FullSource, MarkupOnly
from annotated_snippets.core.ports.analyzer import SourceFileHandle
from annotated_snippets.models import Diagnostic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedDocument:
    handle: SourceFileHandle

    def resolve_imports(self) -> "ImportsResolvedDocument":
        import_count = len(self.handle.get_import_declarations())
        added = self.handle.resolve_missing_imports()
        resolved_count = len(self.handle.get_import_declarations())

        # No imports of its own but some after resolution: the snippet is bare markup.
        mode: DocumentMode
        if import_count == 0 and resolved_count > 0:
            mode = MarkupOnly(import_line_count=resolved_count)
        else:
            mode = FullSource()

        logger.debug("Resolved %d import(s) for %s (mode: %s)", added, self.handle.filename, mode)
        return ImportsResolvedDocument(self.handle, mode)


@dataclass(frozen=True)
class ImportsResolvedDocument:
    handle: SourceFileHandle
    mode: DocumentMode

    def format(self, indent_size: int = 2) -> "FormattedDocument":
        self.handle.reformat(indent_size=indent_size)
        return FormattedDocument(self.handle, self.mode)


@dataclass(frozen=True)
class FormattedDocument:
    handle: SourceFileHandle
    mode: DocumentMode

    def diagnose(self) -> "DiagnosedDocument":
        return DiagnosedDocument(
            handle=self.handle,
            mode=self.mode,
            text=self.handle.full_text(),
            diagnostics=tuple(self.handle.get_diagnostics()),
        )


@dataclass(frozen=True)
class DiagnosedDocument:
    handle: SourceFileHandle
    mode: DocumentMode
    text: str
    diagnostics: tuple[Diagnostic, ...]

    @property
    def filename(self) -> str:
        return self.handle.filename

    @property
    def rendered_text(self) -> str:
        """The text shown to the reader, without a markup-only import prefix."""
        hidden = self.mode.hidden_line_count
        if not hidden:
            return self.text
        return "\n".join(self.text.split("\n")[hidden:])

    @property
    def hidden_prefix_length(self) -> int:
        hidden = self.mode.hidden_line_count
        if not hidden:
            return 0
        return sum(len(line) + 1 for line in self.text.split("\n")[:hidden])


def prepare_document(handle: SourceFileHandle, indent_size: int = 2) -> DiagnosedDocument:
    return ParsedDocument(handle).resolve_imports().format(indent_size=indent_size).diagnose()
