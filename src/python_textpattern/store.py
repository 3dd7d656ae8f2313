"""
The text store contract consumed by ranges, and the plain-text store.

A store owns the text, its line table, its formatting and its on-screen
geometry. Ranges never cache any of that; they ask the store for one text
snapshot per operation and detect staleness through the store's length.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .attributes import (
    FONT_WEIGHT_NORMAL,
    NOT_SUPPORTED,
    AttrValue,
    CapStyle,
    HorizontalTextAlignment,
    TextAttribute,
    TextDecorationLineStyle,
    Uniform,
)
from .classifier import at_paragraph_boundary
from .layout import GridLayout, LayoutMetrics
from .types import AttributeLevel, Corner, Point, Rect

logger = logging.getLogger(__name__)

TextChangedListener = Callable[[], None]


@runtime_checkable
class TextStore(Protocol):
    """Capabilities a text range needs from its backing store.

    Offsets are character indices into the store's text. Geometry is in
    client coordinates except where noted as screen coordinates.
    """

    supports_corner_probing: bool

    # Text and lines
    def length(self) -> int: ...
    def get_text(self, start: int = 0, end: int | None = None) -> str: ...
    def line_count(self) -> int: ...
    def line_from_offset(self, offset: int) -> int: ...
    def offset_of_line(self, line: int) -> int: ...
    def is_paragraph_boundary(self, offset: int) -> bool: ...

    # Formatting
    def attribute_at(self, start: int, end: int, attribute: TextAttribute) -> AttrValue: ...
    def next_format_boundary(
        self, offset: int, level: AttributeLevel, backwards: bool = False
    ) -> int | None: ...

    # Geometry and viewport
    def is_multiline(self) -> bool: ...
    def client_rect(self) -> Rect: ...
    def screen_origin(self) -> Point: ...
    def line_height(self) -> float: ...
    def first_visible_line(self) -> int: ...
    def lines_per_page(self) -> int: ...
    def visible_range(self) -> tuple[int, int]: ...
    def pos_from_char(self, offset: int) -> Point: ...
    def upper_right_of_char(self, offset: int) -> Point: ...
    def rect_for_offset(self, offset: int) -> Rect: ...
    def corner_point(self, start: int, end: int, corner: Corner) -> Point | None: ...
    def offset_from_point(self, point: Point) -> int: ...

    # Notifications and side effects
    def subscribe(self, listener: TextChangedListener) -> None: ...
    def unsubscribe(self, listener: TextChangedListener) -> None: ...
    def set_focus(self) -> None: ...
    def set_selection(self, start: int, end: int) -> None: ...
    def get_selection(self) -> tuple[int, int]: ...
    def scroll_to_line(self, line: int) -> None: ...
    def scroll_offset_into_view(self, offset: int) -> None: ...


class BaseTextStore(ABC):
    """Shared text, layout, notification and side-effect handling.

    Subclasses supply formatting through :meth:`attribute_at` and
    :meth:`next_format_boundary`.

    Args:
        text: Initial text
        metrics: Layout metrics (defaults to :class:`LayoutMetrics`)
        multiline: Whether the control shows more than one line
    """

    supports_corner_probing = False

    def __init__(
        self,
        text: str = "",
        metrics: LayoutMetrics | None = None,
        multiline: bool = True,
    ) -> None:
        self._text = text
        self._multiline = multiline
        self.layout = GridLayout(metrics, text)
        self._listeners: list[TextChangedListener] = []
        self._selection = (0, 0)
        self.has_focus = False

    # Text and lines

    def length(self) -> int:
        return len(self._text)

    def get_text(self, start: int = 0, end: int | None = None) -> str:
        return self._text[start:end]

    def line_count(self) -> int:
        return self.layout.line_count()

    def line_from_offset(self, offset: int) -> int:
        return self.layout.line_from_offset(offset)

    def offset_of_line(self, line: int) -> int:
        return self.layout.offset_of_line(line)

    def is_paragraph_boundary(self, offset: int) -> bool:
        return at_paragraph_boundary(self._text, offset)

    # Formatting

    @abstractmethod
    def attribute_at(self, start: int, end: int, attribute: TextAttribute) -> AttrValue: ...

    @abstractmethod
    def next_format_boundary(
        self, offset: int, level: AttributeLevel, backwards: bool = False
    ) -> int | None: ...

    # Geometry and viewport

    def is_multiline(self) -> bool:
        return self._multiline

    def client_rect(self) -> Rect:
        return self.layout.metrics.client_rect

    def screen_origin(self) -> Point:
        return self.layout.metrics.screen_origin

    def line_height(self) -> float:
        return self.layout.metrics.line_height

    def first_visible_line(self) -> int:
        return self.layout.first_visible_line

    def lines_per_page(self) -> int:
        return self.layout.lines_per_page()

    def visible_range(self) -> tuple[int, int]:
        return self.layout.visible_range()

    def pos_from_char(self, offset: int) -> Point:
        return self.layout.pos_from_char(offset)

    def upper_right_of_char(self, offset: int) -> Point:
        return self.layout.upper_right_of_char(offset)

    def rect_for_offset(self, offset: int) -> Rect:
        return self.layout.rect_for_offset(offset)

    def corner_point(self, start: int, end: int, corner: Corner) -> Point | None:
        """Screen position of a corner of a one-line span, or None if not visible."""
        point = self.layout.corner_point(start, end, corner)
        if point is None:
            return None
        origin = self.screen_origin()
        return point.offset(origin.x, origin.y)

    def offset_from_point(self, point: Point) -> int:
        """Caret offset nearest to a screen point."""
        origin = self.screen_origin()
        return self.layout.offset_from_point(point.offset(-origin.x, -origin.y))

    # Notifications

    def subscribe(self, listener: TextChangedListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: TextChangedListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_text(self, text: str) -> None:
        self._text = text
        self.layout.reflow(text)
        start, end = self._selection
        self._selection = (min(start, len(text)), min(end, len(text)))
        logger.debug("Text changed, new length %d", len(text))
        for listener in list(self._listeners):
            listener()

    # Side effects

    def set_focus(self) -> None:
        self.has_focus = True

    def set_selection(self, start: int, end: int) -> None:
        logger.debug("Selecting [%d, %d)", start, end)
        self._selection = (start, end)

    def get_selection(self) -> tuple[int, int]:
        return self._selection

    def scroll_to_line(self, line: int) -> None:
        logger.debug("Scrolling to line %d", line)
        self.layout.scroll_to_line(line)

    def scroll_offset_into_view(self, offset: int) -> None:
        self.layout.ensure_column_visible(offset)


@dataclass
class PlainTextFormat:
    """The one formatting that applies to all text of a plain-text control.

    Colors are 0x00BBGGRR integers, sizes are in points.
    """

    font_name: str = "Consolas"
    font_size: float = 10.0
    font_weight: int = FONT_WEIGHT_NORMAL
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    foreground_color: int = 0x000000
    background_color: int = 0xFFFFFF
    alignment: HorizontalTextAlignment = HorizontalTextAlignment.LEFT
    cap_style: CapStyle = CapStyle.NONE
    read_only: bool = False


class PlainTextStore(BaseTextStore):
    """A flat, uniformly formatted text buffer (an edit box).

    Example:
        >>> store = PlainTextStore("hello world", multiline=False)
        >>> store.attribute_at(0, 5, TextAttribute.FONT_NAME)
        Uniform(value='Consolas')
    """

    def __init__(
        self,
        text: str = "",
        metrics: LayoutMetrics | None = None,
        multiline: bool = True,
        text_format: PlainTextFormat | None = None,
    ) -> None:
        super().__init__(text, metrics, multiline)
        self.text_format = text_format or PlainTextFormat()

    def set_text(self, text: str) -> None:
        """Replace the whole buffer and notify subscribers."""
        self._set_text(text)

    def attribute_at(self, start: int, end: int, attribute: TextAttribute) -> AttrValue:
        fmt = self.text_format
        match attribute:
            case TextAttribute.BACKGROUND_COLOR:
                return Uniform(fmt.background_color)
            case TextAttribute.CAP_STYLE:
                return Uniform(fmt.cap_style)
            case TextAttribute.FONT_NAME:
                return Uniform(fmt.font_name)
            case TextAttribute.FONT_SIZE:
                return Uniform(fmt.font_size)
            case TextAttribute.FONT_WEIGHT:
                return Uniform(fmt.font_weight)
            case TextAttribute.FOREGROUND_COLOR:
                return Uniform(fmt.foreground_color)
            case TextAttribute.HORIZONTAL_TEXT_ALIGNMENT:
                return Uniform(fmt.alignment)
            case TextAttribute.IS_ITALIC:
                return Uniform(fmt.italic)
            case TextAttribute.IS_READ_ONLY:
                return Uniform(fmt.read_only)
            case TextAttribute.STRIKETHROUGH_STYLE:
                return Uniform(_decoration(fmt.strikethrough))
            case TextAttribute.UNDERLINE_STYLE:
                return Uniform(_decoration(fmt.underline))
            case _:
                return NOT_SUPPORTED

    def next_format_boundary(
        self, offset: int, level: AttributeLevel, backwards: bool = False
    ) -> int | None:
        # One format run spans the whole buffer at both levels.
        if backwards:
            return 0 if offset > 0 else None
        return self.length() if offset < self.length() else None


def _decoration(flag: bool) -> TextDecorationLineStyle:
    return TextDecorationLineStyle.SINGLE if flag else TextDecorationLineStyle.NONE
