from collections.abc import Sequence

from annotated_snippets.models import Segment, Token

ERROR_DECORATION = "red wavy underline"


def is_plain(token: Token, foreground: str) -> bool:
    return token.color.lower() == foreground.lower() or token.content.strip() == ""


def render_token(token: Token, foreground: str) -> Segment:
    if is_plain(token, foreground):
        return Segment(kind="text", content=token.content)

    style = {
        **token.font_style,
        "color": token.color,
        "text_decoration": ERROR_DECORATION if token.has_error else "none",
    }
    return Segment(kind="span", content=token.content, style=style)


def render_tokens(lines: Sequence[Sequence[Token]], foreground: str) -> list[Segment]:
    """Lay out token lines as one segment stream, with a break between lines."""
    segments: list[Segment] = []
    last_index = len(lines) - 1
    for line_index, line in enumerate(lines):
        segments.extend(render_token(token, foreground) for token in line)
        if line_index != last_index:
            segments.append(Segment(kind="break", content="\n"))
    return segments
