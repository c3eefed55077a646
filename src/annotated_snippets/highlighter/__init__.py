from annotated_snippets.highlighter.pygments_adapter import PygmentsHighlighter, lexer_for, scope_for

__all__ = ["PygmentsHighlighter", "lexer_for", "scope_for"]
