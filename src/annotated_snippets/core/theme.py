import json
from pathlib import Path

from annotated_snippets.models import Theme

DEFAULT_THEME_DATA = {
    "name": "snippets-dark",
    "colors": {
        "editor.background": "#101218",
        "editor.foreground": "#D4D4D4",
        "editorLineNumber.foreground": "#858585",
        "editorLineNumber.activeForeground": "#C6C6C6",
        "contrastBorder": "#2B2F3A",
    },
    "tokenColors": [
        {"scope": "comment", "settings": {"foreground": "#6A9955", "fontStyle": "italic"}},
        {"scope": "keyword", "settings": {"foreground": "#569CD6"}},
        {"scope": "keyword.operator", "settings": {"foreground": "#D4D4D4"}},
        {"scope": "string", "settings": {"foreground": "#CE9178"}},
        {"scope": "constant.numeric", "settings": {"foreground": "#B5CEA8"}},
        {"scope": "entity.name.function, support.function", "settings": {"foreground": "#DCDCAA"}},
        {"scope": "entity.name.type", "settings": {"foreground": "#4EC9B0"}},
        {"scope": "entity.name.tag", "settings": {"foreground": "#569CD6"}},
        {"scope": "entity.other.attribute-name", "settings": {"foreground": "#9CDCFE"}},
        {"scope": "variable", "settings": {"foreground": "#9CDCFE"}},
        {"scope": "punctuation", "settings": {"foreground": "#D4D4D4"}},
    ],
}

_FONT_STYLE_KEYS = {
    "italic": ("font_style", "italic"),
    "bold": ("font_weight", "bold"),
    "underline": ("text_decoration", "underline"),
}


def default_theme() -> Theme:
    return Theme.model_validate(DEFAULT_THEME_DATA)


def load_theme(path: Path) -> Theme:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise FileNotFoundError(f"Theme file not found: {path}") from None
    return Theme.model_validate(data)


def font_style_from_settings(font_style: str | None) -> dict[str, str]:
    style: dict[str, str] = {}
    for part in (font_style or "").split():
        if part in _FONT_STYLE_KEYS:
            key, value = _FONT_STYLE_KEYS[part]
            style[key] = value
    return style


def _scope_matches(rule_scope: str, scope: str) -> bool:
    return scope == rule_scope or scope.startswith(rule_scope + ".")


class ScopeResolver:
    """Resolve TextMate scopes against a theme's ``tokenColors`` rules.

    The rule with the longest matching scope wins; ties go to the later rule.
    """

    def __init__(self, theme: Theme) -> None:
        self._theme = theme
        self._foreground = theme.foreground
        self._cache: dict[str | None, tuple[str, dict[str, str]]] = {}

    def resolve(self, scope: str | None) -> tuple[str, dict[str, str]]:
        if scope in self._cache:
            return self._cache[scope]
        best_length = -1
        color = self._foreground
        font_style: str | None = None
        if scope:
            for rule in self._theme.token_colors:
                for rule_scope in rule.scopes:
                    if _scope_matches(rule_scope, scope) and len(rule_scope) >= best_length:
                        best_length = len(rule_scope)
                        color = rule.settings.foreground or self._foreground
                        font_style = rule.settings.font_style
        resolved = color, font_style_from_settings(font_style)
        self._cache[scope] = resolved
        return resolved
