import logging
from collections.abc import Sequence
from functools import cache

from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.token import Comment, Keyword, Name, Number, Operator, Punctuation, String, _TokenType
from pygments.util import ClassNotFound

from annotated_snippets.core.languages import LEXER_FALLBACKS, lexer_name_for
from annotated_snippets.core.pipeline import DiagnosedDocument
from annotated_snippets.core.theme import ScopeResolver
from annotated_snippets.models import Diagnostic, Theme, Token

logger = logging.getLogger(__name__)

_SCOPES: dict[_TokenType, str] = {
    Comment: "comment",
    Keyword: "keyword",
    Keyword.Constant: "constant.language",
    Operator: "keyword.operator",
    String: "string",
    Number: "constant.numeric",
    Name: "variable",
    Name.Function: "entity.name.function",
    Name.Class: "entity.name.type",
    Name.Tag: "entity.name.tag",
    Name.Attribute: "entity.other.attribute-name",
    Name.Builtin: "support.function",
    Punctuation: "punctuation",
}


def scope_for(token_type: _TokenType | None) -> str | None:
    """Map a Pygments token type to the closest TextMate scope."""
    while token_type is not None:
        if token_type in _SCOPES:
            return _SCOPES[token_type]
        token_type = token_type.parent
    return None


@cache
def lexer_for(language: str | None) -> Lexer:
    name: str | None = lexer_name_for(language)
    while name is not None:
        try:
            return get_lexer_by_name(name, stripnl=False, ensurenl=False)
        except ClassNotFound:
            fallback = LEXER_FALLBACKS.get(name)
            logger.warning("No lexer named %r; falling back to %r", name, fallback or "text")
            name = fallback
    return TextLexer(stripnl=False, ensurenl=False)


def _error_spans(diagnostics: Sequence[Diagnostic]) -> list[tuple[int, int]]:
    # A zero-length diagnostic still marks the character it points at.
    return [(d.start, d.end if d.length else d.start + 1) for d in diagnostics]


def _overlaps(start: int, end: int, spans: Sequence[tuple[int, int]]) -> bool:
    return any(span_start < end and start < span_end for span_start, span_end in spans)


class PygmentsHighlighter:
    """Highlight text into lines of tokens coloured by a VS Code style theme.

    Implements the ``Highlighter`` protocol.
    """

    def __init__(self, theme: Theme) -> None:
        self._resolver = ScopeResolver(theme)

    async def highlight(
        self,
        text: str,
        language: str | None,
        document: DiagnosedDocument | None = None,
    ) -> list[list[Token]]:
        offset = 0
        spans: list[tuple[int, int]] = []
        if document is not None:
            text = document.rendered_text
            offset = document.hidden_prefix_length
            spans = _error_spans(document.diagnostics)

        lines: list[list[Token]] = [[]]
        for token_type, value in lexer_for(language).get_tokens(text):
            color, font_style = self._resolver.resolve(scope_for(token_type))
            for index, part in enumerate(value.split("\n")):
                if index > 0:
                    lines.append([])
                    offset += 1
                if not part:
                    continue
                end = offset + len(part)
                lines[-1].append(
                    Token(
                        content=part,
                        color=color,
                        font_style=font_style,
                        has_error=_overlaps(offset, end, spans),
                    )
                )
                offset = end
        return lines
