"""Unit tests for diagnostic overlays and symbol association."""

import pytest

from annotated_snippets.core.diagnostics import (
    covers,
    diagnostic_boxes,
    diagnostics_for_symbol,
    should_auto_open,
)
from annotated_snippets.core.geometry import FullSource, MarkupOnly
from annotated_snippets.models import Diagnostic, SymbolBound
from tests.fakes import FakeSourceFile


def _bound(start: int) -> SymbolBound:
    return SymbolBound(start=start, top=0, left=0, width=1, height=20)


class TestSymbolAssociation:
    def test_symbol_inside_span_gets_diagnostic(self) -> None:
        diagnostic = Diagnostic(start=10, length=10, message="Type mismatch.")
        assert diagnostics_for_symbol([diagnostic], _bound(15)) == [diagnostic]

    def test_symbol_after_span_gets_nothing(self) -> None:
        diagnostic = Diagnostic(start=10, length=10, message="Type mismatch.")
        assert diagnostics_for_symbol([diagnostic], _bound(25)) == []

    @pytest.mark.parametrize(("offset", "expected"), [(9, False), (10, True), (20, True), (21, False)])
    def test_span_bounds_are_inclusive(self, offset: int, expected: bool) -> None:
        assert covers(Diagnostic(start=10, length=10, message="m"), offset) is expected

    def test_symbol_may_collect_several_diagnostics(self) -> None:
        diagnostics = [
            Diagnostic(start=0, length=30, message="outer"),
            Diagnostic(start=12, length=2, message="inner"),
            Diagnostic(start=40, length=2, message="elsewhere"),
        ]
        assert [d.message for d in diagnostics_for_symbol(diagnostics, _bound(13))] == ["outer", "inner"]

    def test_auto_open_requires_errors_and_flag(self) -> None:
        diagnostic = Diagnostic(start=0, length=1, message="m")
        assert should_auto_open([diagnostic], show_errors=True) is True
        assert should_auto_open([diagnostic], show_errors=False) is False
        assert should_auto_open([], show_errors=True) is False


class TestDiagnosticBoxes:
    def test_box_from_start_offset_and_length(self) -> None:
        handle = FakeSourceFile("const a = 1\nconst b: string = 2")
        diagnostic = Diagnostic(start=18, length=1, message="Type 'number' is not assignable.")
        [(found, box)] = diagnostic_boxes(handle, [diagnostic], FullSource())
        assert found is diagnostic
        assert (box.top, box.left, box.width, box.height) == (20, 6, 1, 20)

    def test_multi_line_diagnostic_is_drawn_on_start_line(self) -> None:
        handle = FakeSourceFile("foo(\n  bar\n)")
        [(_, box)] = diagnostic_boxes(handle, [Diagnostic(start=0, length=12, message="m")], FullSource())
        assert box.top == 0
        assert box.width == 12

    def test_diagnostics_in_hidden_prefix_are_omitted(self) -> None:
        source = 'import { Button } from "ui"\n\n<Button />'
        handle = FakeSourceFile(source)
        hidden = Diagnostic(start=9, length=6, message="in the injected import")
        visible = Diagnostic(start=source.rindex("Button"), length=6, message="visible")
        boxes = diagnostic_boxes(handle, [hidden, visible], MarkupOnly(import_line_count=1))
        assert [(d.message, b.top, b.left) for d, b in boxes] == [("visible", 0, 1)]
