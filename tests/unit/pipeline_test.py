"""Unit tests for the staged document pipeline."""

from annotated_snippets.core.geometry import FullSource, MarkupOnly
from annotated_snippets.core.pipeline import DiagnosedDocument, ParsedDocument, prepare_document
from annotated_snippets.core.ports.analyzer import ImportDeclaration, NodeKind, SyntaxNode
from annotated_snippets.models import Diagnostic
from tests.fakes import FakeSourceFile


def _import_declaration(start: int = 0) -> ImportDeclaration:
    specifier = SyntaxNode(kind=NodeKind.MODULE_SPECIFIER, start=start + 20, end=start + 24, text='"ui"')
    return ImportDeclaration(start=start, end=start + 24, module_specifier=specifier)


def test_stages_run_in_order() -> None:
    handle = FakeSourceFile("const a = 1", diagnostics=[Diagnostic(start=0, length=1, message="m")])
    document = prepare_document(handle)
    assert handle.calls == ["resolve_missing_imports", "reformat", "get_diagnostics"]
    assert isinstance(document, DiagnosedDocument)
    assert document.diagnostics == (Diagnostic(start=0, length=1, message="m"),)


def test_snippet_without_imports_stays_full_source() -> None:
    resolved = ParsedDocument(FakeSourceFile("const a = 1")).resolve_imports()
    assert resolved.mode == FullSource()


def test_snippet_with_only_injected_imports_is_markup_only() -> None:
    handle = FakeSourceFile("<Button />", resolved_imports=[_import_declaration(), _import_declaration(25)])
    resolved = ParsedDocument(handle).resolve_imports()
    assert resolved.mode == MarkupOnly(import_line_count=2)
    assert resolved.mode.y_offset == 4


def test_snippet_with_own_imports_stays_full_source() -> None:
    handle = FakeSourceFile(
        'import { A } from "ui"\n<A />',
        imports=[_import_declaration()],
        resolved_imports=[_import_declaration(25)],
    )
    assert ParsedDocument(handle).resolve_imports().mode == FullSource()


def test_markup_only_rendered_text_drops_prefix() -> None:
    text = 'import { Button } from "ui"\n\n<Button />'
    document = DiagnosedDocument(
        handle=FakeSourceFile(text),
        mode=MarkupOnly(import_line_count=1),
        text=text,
        diagnostics=(),
    )
    assert document.rendered_text == "<Button />"
    assert document.hidden_prefix_length == text.index("<")


def test_full_source_rendered_text_is_unchanged() -> None:
    document = DiagnosedDocument(handle=FakeSourceFile("a\nb"), mode=FullSource(), text="a\nb", diagnostics=())
    assert document.rendered_text == "a\nb"
    assert document.hidden_prefix_length == 0
