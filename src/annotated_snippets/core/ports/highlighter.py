from typing import TYPE_CHECKING, Protocol

from annotated_snippets.models import Token

if TYPE_CHECKING:
    from annotated_snippets.core.pipeline import DiagnosedDocument


class Highlighter(Protocol):
    async def highlight(
        self,
        text: str,
        language: str | None,
        document: "DiagnosedDocument | None" = None,
    ) -> list[list[Token]]: ...
