"""Unit tests for the Pygments highlighter adapter."""

import pytest
from pygments.token import Comment, Keyword, Name, Text

from annotated_snippets.core.geometry import FullSource, MarkupOnly
from annotated_snippets.core.pipeline import DiagnosedDocument
from annotated_snippets.highlighter import PygmentsHighlighter
from annotated_snippets.highlighter.pygments_adapter import lexer_for, scope_for
from annotated_snippets.models import Diagnostic, Theme
from tests.fakes import FakeSourceFile


def _contents(lines: list[list]) -> list[str]:
    return ["".join(token.content for token in line) for line in lines]


def test_scope_for_walks_token_parents() -> None:
    assert scope_for(Keyword.Declaration) == "keyword"
    assert scope_for(Keyword.Constant) == "constant.language"
    assert scope_for(Comment.Single) == "comment"
    assert scope_for(Name.Other) == "variable"
    assert scope_for(Text) is None


def test_unknown_language_falls_back_to_plain_text() -> None:
    assert lexer_for("no-such-language").name == "Text only"
    assert lexer_for(None).name == "Text only"


@pytest.mark.asyncio
async def test_lines_preserve_source_text(theme: Theme) -> None:
    source = "const a = 1\n\nfunction f() {\n  return a\n}"
    lines = await PygmentsHighlighter(theme).highlight(source, "ts")
    assert _contents(lines) == source.split("\n")
    assert all("\n" not in token.content for line in lines for token in line)


@pytest.mark.asyncio
async def test_tokens_are_coloured_by_scope(theme: Theme) -> None:
    [line] = await PygmentsHighlighter(theme).highlight("const a = 1", "ts")
    by_content = {token.content: token for token in line}
    assert by_content["const"].color == "#569CD6"
    assert by_content["1"].color == "#B5CEA8"


@pytest.mark.asyncio
async def test_comment_font_style(theme: Theme) -> None:
    [line] = await PygmentsHighlighter(theme).highlight("x = 1  # note", "python")
    [comment] = [token for token in line if token.content == "# note"]
    assert comment.color == "#6A9955"
    assert comment.font_style == {"font_style": "italic"}


@pytest.mark.asyncio
async def test_plain_text_uses_the_foreground(theme: Theme) -> None:
    [line] = await PygmentsHighlighter(theme).highlight("just words", None)
    assert [(token.content, token.color) for token in line] == [("just words", "#D4D4D4")]


@pytest.mark.asyncio
async def test_tokens_overlapping_diagnostics_are_flagged(theme: Theme) -> None:
    source = "const a = 1"
    document = DiagnosedDocument(
        handle=FakeSourceFile(source),
        mode=FullSource(),
        text=source,
        diagnostics=(Diagnostic(start=6, length=1, message="unused"),),
    )
    [line] = await PygmentsHighlighter(theme).highlight(source, "ts", document)
    flagged = [token.content for token in line if token.has_error]
    assert flagged == ["a"]


@pytest.mark.asyncio
async def test_markup_only_prefix_is_not_highlighted(theme: Theme) -> None:
    source = 'import { Button } from "ui";\n\n<Button />'
    document = DiagnosedDocument(
        handle=FakeSourceFile(source, filename="0.snippet.tsx"),
        mode=MarkupOnly(import_line_count=1),
        text=source,
        diagnostics=(Diagnostic(start=source.rindex("Button"), length=6, message="bad"),),
    )
    lines = await PygmentsHighlighter(theme).highlight(source, "tsx", document)
    assert _contents(lines) == ["<Button />"]
    assert [token.content for token in lines[0] if token.has_error] == ["Button"]
