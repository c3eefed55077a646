from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from annotated_snippets.errors import ConfigurationError


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    color: str
    font_style: dict[str, str] = Field(default_factory=dict)
    has_error: bool = False


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int
    length: int
    message: str

    @property
    def end(self) -> int:
        return self.start + self.length


class PixelBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    top: float
    left: float
    width: float
    height: float


class SymbolBound(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int
    top: float
    left: float
    width: float
    height: float

    @property
    def box(self) -> PixelBox:
        return PixelBox(top=self.top, left=self.left, width=self.width, height=self.height)


class HighlightRange(BaseModel):
    """Inclusive, 1-based line interval."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int


class QuickInfo(BaseModel):
    start: int
    end: int
    text: str
    description: str | None = None
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    is_open: bool = False


OverlayKind = Literal["highlight-range", "diagnostic", "symbol-hover"]


class Overlay(BaseModel):
    kind: OverlayKind
    key: str
    box: PixelBox
    z_index: int
    style: dict[str, str] = Field(default_factory=dict)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    auto_open: bool = False
    quick_info: QuickInfo | None = None


class Segment(BaseModel):
    kind: Literal["text", "span", "break"]
    content: str
    style: dict[str, str] = Field(default_factory=dict)


class GutterRow(BaseModel):
    number: int
    active: bool
    color: str | None = None


class HeaderRow(BaseModel):
    filename: str
    value: str | None = None


class AnnotatedView(BaseModel):
    filename: str | None
    language: str | None
    header: HeaderRow | None = None
    gutter: list[GutterRow] | None = None
    overlays: list[Overlay] = Field(default_factory=list)
    segments: list[Segment] = Field(default_factory=list)
    line_count: int = 0
    line_height: int = 20
    token_layer: int = 2
    style: dict[str, str] = Field(default_factory=dict)
    padding_horizontal: str = "1rem"
    padding_vertical: str = "1rem"
    inline: bool = False
    class_name: str | None = None

    def overlays_of(self, kind: OverlayKind) -> list[Overlay]:
        return [overlay for overlay in self.overlays if overlay.kind == kind]


class TokenColorSettings(BaseModel):
    foreground: str | None = None
    font_style: str | None = Field(default=None, alias="fontStyle")

    model_config = ConfigDict(populate_by_name=True)


class TokenColorRule(BaseModel):
    scope: str | list[str] | None = None
    settings: TokenColorSettings = Field(default_factory=TokenColorSettings)

    @property
    def scopes(self) -> list[str]:
        if self.scope is None:
            return []
        if isinstance(self.scope, str):
            return [part.strip() for part in self.scope.split(",") if part.strip()]
        return list(self.scope)


class Theme(BaseModel):
    """VS Code style colour theme.

    ``colors`` maps semantic roles (``editor.foreground``, ``contrastBorder`` ...)
    to colour strings; ``tokenColors`` holds the TextMate scope rules.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    colors: dict[str, str] = Field(default_factory=dict)
    token_colors: list[TokenColorRule] = Field(default_factory=list, alias="tokenColors")

    def color(self, key: str) -> str | None:
        return self.colors.get(key)

    def require_color(self, key: str) -> str:
        value = self.colors.get(key)
        if value is None:
            raise ConfigurationError(f"Theme {self.name or '<unnamed>'!r} is missing required color '{key}'.")
        return value

    @property
    def foreground(self) -> str:
        return self.require_color("editor.foreground")
