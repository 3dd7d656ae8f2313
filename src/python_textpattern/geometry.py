"""
Projection of text spans onto clipped screen rectangles.

Three strategies, picked by store capabilities:

- single-line stores get one rectangle as tall as the client area;
- multi-line stores get one rectangle per visible line;
- stores that report corner positions (attributed stores) are probed per
  line, shrinking the probed span until a corner is visible.

Rectangles are in screen coordinates and empty ones are never returned.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .types import Corner, Rect

if TYPE_CHECKING:
    from .store import TextStore

logger = logging.getLogger(__name__)


class GeometryProjector:
    """Computes bounding rectangles for spans of one store."""

    def __init__(self, store: TextStore) -> None:
        self._store = store

    def bounding_rectangles(self, start: int, end: int) -> list[Rect]:
        """Screen rectangles covering the visible part of [start, end).

        A degenerate span has no rectangles: at a soft line wrap it would be
        ambiguous which line the caret belongs to.
        """
        if start >= end:
            return []
        store = self._store
        if getattr(store, "supports_corner_probing", False):
            rects = self._probed(start, end)
        elif store.is_multiline():
            rects = self._multiline(start, end)
        else:
            rects = [self._single_line(start, end)]
        return [rect for rect in rects if not rect.is_empty]

    def _screen_client_rect(self) -> Rect:
        origin = self._store.screen_origin()
        return self._store.client_rect().offset(origin.x, origin.y)

    def _single_line(self, start: int, end: int) -> Rect:
        store = self._store
        client = store.client_rect()
        origin = store.screen_origin()
        left = store.pos_from_char(start)
        right = store.upper_right_of_char(end - 1)
        rect = Rect(left.x, left.y, right.x - left.x, client.height)
        return rect.intersect(client).offset(origin.x, origin.y)

    def _multiline(self, start: int, end: int) -> list[Rect]:
        store = self._store
        client = store.client_rect()
        origin = store.screen_origin()
        line_height = store.line_height()

        first_visible = store.first_visible_line()
        last_visible = first_visible + store.lines_per_page() - 1
        first = max(store.line_from_offset(start), first_visible)
        last = min(store.line_from_offset(end - 1), last_visible)

        rects: list[Rect] = []
        for line in range(first, last + 1):
            line_start = max(start, store.offset_of_line(line))
            line_end = min(end, store.offset_of_line(line + 1))
            if line_start >= line_end:
                continue
            top_left = store.pos_from_char(line_start)
            top_right = store.upper_right_of_char(line_end - 1)
            rect = Rect.from_edges(top_left.x, top_left.y, top_right.x, top_left.y + line_height)
            rects.append(rect.intersect(client).offset(origin.x, origin.y))
        return rects

    def _probed(self, start: int, end: int) -> list[Rect]:
        store = self._store
        visible_start, visible_end = store.visible_range()
        start = max(start, visible_start)
        end = min(end, visible_end)
        if start >= end:
            return []

        client = self._screen_client_rect()
        rects: list[Rect] = []
        for line in range(store.line_from_offset(start), store.line_from_offset(end - 1) + 1):
            line_start = max(start, store.offset_of_line(line))
            line_end = min(end, store.offset_of_line(line + 1))
            if line_start >= line_end:
                continue
            rect = self._probe_line(line_start, line_end, client)
            if rect is not None:
                rects.append(rect)
        return rects

    def _probe_line(self, start: int, end: int, client: Rect) -> Rect | None:
        rect, trimmed = self._trim_by_corners(start, end, client)
        if trimmed:
            return rect

        while not trimmed and start < end:
            start += 1
            if start < end:
                end -= 1
            rect, trimmed = self._trim_by_corners(start, end, rect)

        if not trimmed:
            return None
        # Only the middle of the line is visible; its horizontal extent is unknown
        logger.debug("Line span [%d, %d) found after shrinking, using client width", start, end)
        return Rect(client.x, rect.y, client.width, rect.height)

    def _trim_by_corners(self, start: int, end: int, rect: Rect) -> tuple[Rect, bool]:
        """Trim ``rect`` to the visible corners of the one-line span [start, end).

        Returns:
            Tuple of (trimmed rectangle, whether any corner was visible)
        """
        store = self._store
        left, top, right, bottom = rect.left, rect.top, rect.right, rect.bottom

        top_left = store.corner_point(start, end, Corner.TOP_LEFT)
        if top_left is not None:
            left, top = top_left.x, top_left.y
        bottom_right = store.corner_point(start, end, Corner.BOTTOM_RIGHT)
        if bottom_right is not None:
            right, bottom = bottom_right.x, bottom_right.y
        found = top_left is not None or bottom_right is not None

        if top_left is None or bottom_right is None:
            top_right = store.corner_point(start, end, Corner.TOP_RIGHT)
            if top_right is not None:
                right, top = top_right.x, top_right.y
                found = True
            else:
                bottom_left = store.corner_point(start, end, Corner.BOTTOM_LEFT)
                if bottom_left is not None:
                    left, bottom = bottom_left.x, bottom_left.y
                    found = True

        return Rect.from_edges(left, top, right, bottom), found
