"""
Core value types shared by the range engine and the stores.

Units, endpoints and the small geometry types used for hit-testing and
bounding rectangles.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from .errors import UnsupportedUnitError


class TextUnit(Enum):
    """Granularity of range movement and expansion.

    PAGE and DOCUMENT both address the whole store; there is no pagination model.
    """

    CHARACTER = "character"
    FORMAT = "format"
    WORD = "word"
    LINE = "line"
    PARAGRAPH = "paragraph"
    PAGE = "page"
    DOCUMENT = "document"

    @classmethod
    def coerce(cls, value: Any) -> TextUnit:
        """Resolve a unit from a member or its (case-insensitive) name.

        Raises:
            UnsupportedUnitError: If the value names no unit
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "")
            key = _UNIT_ALIASES.get(key, key)
            for unit in cls:
                if unit.value == key:
                    return unit
        raise UnsupportedUnitError(value)


_UNIT_ALIASES = {"formatrun": "format", "char": "character", "story": "document"}


class Endpoint(Enum):
    """Either end of a text range."""

    START = auto()
    END = auto()


class AttributeLevel(Enum):
    """Formatting granularity an attribute belongs to."""

    CHARACTER = auto()
    PARAGRAPH = auto()


class Corner(Enum):
    """Corners of a one-line span that a store can report positions for."""

    TOP_LEFT = auto()
    TOP_RIGHT = auto()
    BOTTOM_LEFT = auto()
    BOTTOM_RIGHT = auto()


@dataclass(frozen=True)
class Point:
    """A point in client or screen coordinates."""

    x: float
    y: float

    def offset(self, dx: float, dy: float) -> Point:
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle (x, y, width, height)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        """True unless both width and height are positive."""
        return self.width <= 0 or self.height <= 0

    @classmethod
    def from_edges(cls, left: float, top: float, right: float, bottom: float) -> Rect:
        return cls(left, top, right - left, bottom - top)

    def offset(self, dx: float, dy: float) -> Rect:
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def intersect(self, other: Rect) -> Rect:
        """Return the overlap of two rectangles.

        Disjoint rectangles produce a zero-sized rectangle at this one's origin.
        """
        left = max(self.left, other.left)
        top = max(self.top, other.top)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right < left or bottom < top:
            return Rect(self.x, self.y, 0, 0)
        return Rect.from_edges(left, top, right, bottom)

    def contains(self, point: Point) -> bool:
        """Inclusive containment test (edges count as inside)."""
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


def rects_to_doubles(rects: list[Rect]) -> list[float]:
    """Flatten rectangles to the automation wire form [x, y, w, h, x, y, w, h, ...]."""
    result: list[float] = []
    for rect in rects:
        result.extend(rect.to_tuple())
    return result
