"""Unit tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from annotated_snippets.models import (
    AnnotatedView,
    Diagnostic,
    Overlay,
    PixelBox,
    SymbolBound,
    Theme,
    Token,
    TokenColorRule,
)


class TestDiagnostic:
    def test_end_is_exclusive(self) -> None:
        assert Diagnostic(start=4, length=3, message="m").end == 7

    def test_is_immutable(self) -> None:
        diagnostic = Diagnostic(start=0, length=1, message="m")
        with pytest.raises(ValidationError):
            diagnostic.start = 2  # type: ignore[misc]

    def test_requires_message(self) -> None:
        with pytest.raises(ValidationError):
            Diagnostic(start=0, length=1)  # type: ignore[call-arg]


class TestToken:
    def test_defaults(self) -> None:
        token = Token(content="a", color="#FFFFFF")
        assert token.font_style == {}
        assert token.has_error is False


class TestSymbolBound:
    def test_box(self) -> None:
        bound = SymbolBound(start=6, top=20, left=6, width=1, height=20)
        assert bound.box == PixelBox(top=20, left=6, width=1, height=20)


class TestTokenColorRule:
    def test_comma_separated_scopes(self) -> None:
        rule = TokenColorRule(scope="entity.name.function, support.function")
        assert rule.scopes == ["entity.name.function", "support.function"]

    def test_list_and_missing_scopes(self) -> None:
        assert TokenColorRule(scope=["a", "b"]).scopes == ["a", "b"]
        assert TokenColorRule().scopes == []


class TestTheme:
    def test_accepts_vscode_aliases(self) -> None:
        theme = Theme.model_validate(
            {"colors": {"editor.foreground": "#000"}, "tokenColors": [{"settings": {"fontStyle": "bold"}}]}
        )
        assert theme.token_colors[0].settings.font_style == "bold"


class TestAnnotatedView:
    def test_overlays_of_filters_by_kind(self) -> None:
        box = PixelBox(top=0, left=0, width=1, height=20)
        view = AnnotatedView(
            filename=None,
            language="ts",
            overlays=[
                Overlay(kind="highlight-range", key="highlight-0", box=box, z_index=0),
                Overlay(kind="symbol-hover", key="symbol-0", box=box, z_index=3),
            ],
        )
        assert [overlay.key for overlay in view.overlays_of("symbol-hover")] == ["symbol-0"]
        assert view.overlays_of("diagnostic") == []

    def test_serializes_to_json(self) -> None:
        view = AnnotatedView(filename="a.ts", language="ts")
        assert '"segments":[]' in view.model_dump_json()
