from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from annotated_snippets.models import Diagnostic


class NodeKind(str, Enum):
    IDENTIFIER = "identifier"
    MODULE_SPECIFIER = "module_specifier"
    IMPORT_SPECIFIER = "import_specifier"
    IMPORT_CLAUSE = "import_clause"
    DOC_COMMENT = "doc_comment"
    DOC_TAG = "doc_tag"
    OTHER = "other"


@dataclass(frozen=True)
class SyntaxNode:
    kind: NodeKind
    start: int
    end: int
    text: str
    parent_kind: NodeKind | None = None

    @property
    def width(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ImportDeclaration:
    start: int
    end: int
    module_specifier: SyntaxNode


class SourceFileHandle(Protocol):
    @property
    def filename(self) -> str: ...

    def full_text(self) -> str: ...

    def get_import_declarations(self) -> list[ImportDeclaration]: ...

    def get_identifiers(self) -> list[SyntaxNode]: ...

    def get_diagnostics(self) -> list[Diagnostic]: ...

    def offset_to_line_column(self, offset: int) -> tuple[int, int]: ...

    def reformat(self, indent_size: int = 2) -> None: ...

    def resolve_missing_imports(self) -> int: ...

    def get_quick_info(self, offset: int) -> str | None: ...


class DocumentRegistry(Protocol):
    def register(self, filename: str, text: str, overwrite: bool = False) -> SourceFileHandle: ...

    def get(self, filename: str) -> SourceFileHandle | None: ...
