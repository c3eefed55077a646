"""Offset to line/column to pixel-box conversion.

Vertical unit is a fixed line height, horizontal unit is one monospace
character cell. Rendered snippets in markup-only mode have their synthetic
import lines and one separator line stripped, so those lines are subtracted.
"""

from dataclasses import dataclass
from typing import Protocol

from annotated_snippets.models import PixelBox

LINE_HEIGHT = 20


class LineColumnResolver(Protocol):
    def offset_to_line_column(self, offset: int) -> tuple[int, int]: ...


@dataclass(frozen=True)
class FullSource:
    @property
    def y_offset(self) -> int:
        return 1

    @property
    def hidden_line_count(self) -> int:
        return 0

    @property
    def is_markup_only(self) -> bool:
        return False


@dataclass(frozen=True)
class MarkupOnly:
    import_line_count: int

    @property
    def y_offset(self) -> int:
        return self.import_line_count + 2

    @property
    def hidden_line_count(self) -> int:
        return self.import_line_count + 1

    @property
    def is_markup_only(self) -> bool:
        return True


DocumentMode = FullSource | MarkupOnly


def line_to_top(line: int, mode: DocumentMode, line_height: int = LINE_HEIGHT) -> float:
    return (line - mode.y_offset) * line_height


def offset_to_box(
    resolver: LineColumnResolver,
    offset: int,
    length: int,
    mode: DocumentMode,
    line_height: int = LINE_HEIGHT,
) -> PixelBox:
    line, column = resolver.offset_to_line_column(offset)
    return PixelBox(
        top=line_to_top(line, mode, line_height),
        left=column - 1,
        width=length,
        height=line_height,
    )
