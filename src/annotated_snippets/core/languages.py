from pathlib import Path

_LANGUAGE_ALIASES = {
    "bash": "shellscript",
    "shell": "shellscript",
    "sh": "shellscript",
    "mjs": "js",
    "cjs": "js",
    "javascript": "js",
    "typescript": "ts",
    "py": "python",
    "yml": "yaml",
    "md": "markdown",
}

# Languages whose snippets are registered with the analyzer.
ANALYZABLE_LANGUAGES = frozenset({"js", "jsx", "ts", "tsx"})

_GRAMMAR_BY_SUFFIX = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

_LEXER_NAMES = {
    "js": "javascript",
    "javascript": "javascript",
    "jsx": "jsx",
    "ts": "typescript",
    "tsx": "tsx",
    "shellscript": "bash",
}

# Tried in order when a lexer name is unknown to the installed highlighter.
LEXER_FALLBACKS = {
    "tsx": "typescript",
    "jsx": "javascript",
}


def normalize_language(language: str | None) -> str | None:
    if language is None:
        return None
    normalized = language.strip().lower()
    if not normalized:
        return None
    return _LANGUAGE_ALIASES.get(normalized, normalized)


def is_analyzable(language: str | None) -> bool:
    return language in ANALYZABLE_LANGUAGES


def detect_language_from_path(file_path: Path) -> str:
    suffix = file_path.suffix.lower().lstrip(".")
    if not suffix:
        raise ValueError(f"Cannot detect language of '{file_path}': no file extension.")
    resolved = normalize_language(suffix)
    assert resolved is not None
    return resolved


def grammar_for_filename(filename: str) -> str:
    """Return the tree-sitter grammar used to parse ``filename``."""
    suffix = Path(filename).suffix.lower()
    grammar = _GRAMMAR_BY_SUFFIX.get(suffix)
    if grammar is None:
        raise ValueError(f"Unsupported file extension for analysis: {suffix or '<none>'}")
    return grammar


def lexer_name_for(language: str | None) -> str:
    if not language:
        return "text"
    return _LEXER_NAMES.get(language, language)


def is_analyzable_filename(filename: str) -> bool:
    return Path(filename).suffix.lower() in _GRAMMAR_BY_SUFFIX
