"""
Fixed-cell text layout used by the in-memory stores.

Every visible character occupies one cell of ``char_width`` by
``line_height`` pixels. Lines end after a hard break (line feed or vertical
tab) and optionally wrap at a fixed column. Line-break characters have zero
width. Positions are reported in client coordinates; the owning store maps
them to the screen with its screen origin.
"""

from __future__ import annotations

import math
import re
from bisect import bisect_right
from dataclasses import dataclass

from .constants import (
    DEFAULT_CHAR_WIDTH,
    DEFAULT_CLIENT_HEIGHT,
    DEFAULT_CLIENT_WIDTH,
    DEFAULT_LINE_HEIGHT,
    ZERO_WIDTH_CHARS,
)
from .types import Corner, Point, Rect

_HARD_BREAK_RE = re.compile(r"[\n\v]")


@dataclass
class LayoutMetrics:
    """Geometry of the control hosting the text.

    Attributes:
        char_width: Width of one character cell in pixels
        line_height: Height of one line in pixels
        client_width: Width of the client area
        client_height: Height of the client area
        screen_x: Screen x coordinate of the client origin
        screen_y: Screen y coordinate of the client origin
        wrap_columns: Soft-wrap column, or None for no wrapping
    """

    char_width: float = DEFAULT_CHAR_WIDTH
    line_height: float = DEFAULT_LINE_HEIGHT
    client_width: float = DEFAULT_CLIENT_WIDTH
    client_height: float = DEFAULT_CLIENT_HEIGHT
    screen_x: float = 0
    screen_y: float = 0
    wrap_columns: int | None = None

    def __post_init__(self) -> None:
        if self.char_width <= 0 or self.line_height <= 0:
            raise ValueError("char_width and line_height must be positive")
        if self.wrap_columns is not None and self.wrap_columns < 1:
            raise ValueError(f"wrap_columns must be positive, got {self.wrap_columns}")

    @property
    def client_rect(self) -> Rect:
        return Rect(0, 0, self.client_width, self.client_height)

    @property
    def screen_origin(self) -> Point:
        return Point(self.screen_x, self.screen_y)


def compute_line_starts(text: str, wrap_columns: int | None = None) -> list[int]:
    """Return the start offset of every layout line.

    A text ending in a hard break has a final empty line starting at its length.
    """
    starts = [0]
    position = 0
    for match in _HARD_BREAK_RE.finditer(text):
        if wrap_columns:
            starts.extend(range(position + wrap_columns, match.start(), wrap_columns))
        position = match.end()
        starts.append(position)
    if wrap_columns:
        starts.extend(range(position + wrap_columns, len(text), wrap_columns))
    return starts


class GridLayout:
    """Line table, scroll state and cell geometry for one text snapshot."""

    def __init__(self, metrics: LayoutMetrics | None = None, text: str = "") -> None:
        self.metrics = metrics or LayoutMetrics()
        self.first_visible_line = 0
        self.first_visible_column = 0
        self._text = ""
        self._line_starts = [0]
        self.reflow(text)

    def reflow(self, text: str) -> None:
        """Recompute the line table after the text changed."""
        self._text = text
        self._line_starts = compute_line_starts(text, self.metrics.wrap_columns)
        self.first_visible_line = min(self.first_visible_line, self.line_count() - 1)

    # Lines

    def line_count(self) -> int:
        return len(self._line_starts)

    def line_from_offset(self, offset: int) -> int:
        return max(bisect_right(self._line_starts, offset) - 1, 0)

    def offset_of_line(self, line: int) -> int:
        """Start offset of ``line``; one past the last line maps to the text length."""
        if line <= 0:
            return 0
        if line >= len(self._line_starts):
            return len(self._text)
        return self._line_starts[line]

    def _content_end(self, line: int) -> int:
        end = self.offset_of_line(line + 1)
        start = self.offset_of_line(line)
        while end > start and self._text[end - 1] in ZERO_WIDTH_CHARS:
            end -= 1
        return end

    # Viewport

    def lines_per_page(self) -> int:
        return max(1, int(self.metrics.client_height // self.metrics.line_height))

    def visible_columns(self) -> int:
        return max(1, int(self.metrics.client_width // self.metrics.char_width))

    def visible_range(self) -> tuple[int, int]:
        """Offsets covered by the lines currently in view."""
        first = self.first_visible_line
        return self.offset_of_line(first), self.offset_of_line(first + self.lines_per_page())

    def scroll_to_line(self, line: int) -> None:
        self.first_visible_line = min(max(line, 0), self.line_count() - 1)

    def scroll_to_column(self, column: int) -> None:
        self.first_visible_column = max(column, 0)

    def ensure_column_visible(self, offset: int) -> None:
        """Scroll horizontally the minimum needed to bring ``offset`` into view."""
        column = self._column(offset)
        visible = self.visible_columns()
        if column < self.first_visible_column:
            self.scroll_to_column(column)
        elif column > self.first_visible_column + visible:
            self.scroll_to_column(column - visible)

    # Geometry (client coordinates)

    def _column(self, offset: int) -> int:
        start = self.offset_of_line(self.line_from_offset(offset))
        return sum(1 for ch in self._text[start:offset] if ch not in ZERO_WIDTH_CHARS)

    def _cell_width(self, offset: int) -> float:
        if offset >= len(self._text) or self._text[offset] in ZERO_WIDTH_CHARS:
            return 0
        return self.metrics.char_width

    def pos_from_char(self, offset: int) -> Point:
        """Top-left corner of the character at ``offset``."""
        line = self.line_from_offset(offset)
        x = (self._column(offset) - self.first_visible_column) * self.metrics.char_width
        y = (line - self.first_visible_line) * self.metrics.line_height
        return Point(x, y)

    def upper_right_of_char(self, offset: int) -> Point:
        """Top-right corner of the character at ``offset``."""
        point = self.pos_from_char(offset)
        return Point(point.x + self._cell_width(offset), point.y)

    def rect_for_offset(self, offset: int) -> Rect:
        point = self.pos_from_char(offset)
        return Rect(point.x, point.y, self._cell_width(offset), self.metrics.line_height)

    def corner_point(self, start: int, end: int, corner: Corner) -> Point | None:
        """Position of a corner of the one-line span [start, end).

        Returns:
            The corner in client coordinates, or None if it is outside the client area
        """
        top_left = self.pos_from_char(start)
        right = self.upper_right_of_char(end - 1).x if end > start else top_left.x
        bottom = top_left.y + self.metrics.line_height
        match corner:
            case Corner.TOP_LEFT:
                point = top_left
            case Corner.TOP_RIGHT:
                point = Point(right, top_left.y)
            case Corner.BOTTOM_LEFT:
                point = Point(top_left.x, bottom)
            case Corner.BOTTOM_RIGHT:
                point = Point(right, bottom)
        return point if self.metrics.client_rect.contains(point) else None

    def offset_from_point(self, point: Point) -> int:
        """Nearest caret offset to a client-coordinate point."""
        line = self.first_visible_line + math.floor(point.y / self.metrics.line_height)
        line = min(max(line, 0), self.line_count() - 1)
        column = self.first_visible_column + round(point.x / self.metrics.char_width)
        start = self.offset_of_line(line)
        return min(start + max(column, 0), self._content_end(line))
