"""
TextRange: an addressable span of a text store.

A range is a value holding two offsets and the provider it came from. It
never caches text: every operation that reads text or geometry validates its
endpoints against the store's current length first, takes one text snapshot,
and only then mutates. A failed call leaves the range unchanged.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .attributes import AttrValue, TextAttribute
from .classifier import at_paragraph_boundary, at_word_boundary
from .config import WordBreakMode
from .errors import (
    InvalidArgumentError,
    InvalidRangeError,
    OutOfStoreError,
    UnsupportedOperationError,
    UnsupportedUnitError,
)
from .geometry import GeometryProjector
from .movement import enclosing_format_run, move_offset
from .types import AttributeLevel, Endpoint, Rect, TextUnit

if TYPE_CHECKING:
    from .breaker import WordBreaker
    from .provider import TextPatternProvider
    from .store import TextStore

logger = logging.getLogger(__name__)


class TextRange:
    """A span [start, end) of a provider's text store.

    Offsets always satisfy ``0 <= start <= end``. Assigning ``start`` past
    ``end`` drags ``end`` along, and assigning ``end`` before ``start`` drags
    ``start`` back, so a range is never inverted. Whether ``end`` is still
    within the store is checked lazily by :meth:`validate_endpoints`.

    Args:
        provider: The provider whose store this range addresses
        start: Start offset
        end: End offset (defaults to ``start``)

    Raises:
        InvalidRangeError: If ``start`` is negative or ``end < start``

    Example:
        >>> provider = TextPatternProvider.for_text("hello world")
        >>> rng = provider.document_range
        >>> rng.move_endpoint_by_unit(Endpoint.END, TextUnit.WORD, -1)
        -1
        >>> rng.get_text()
        'hello '
    """

    def __init__(self, provider: TextPatternProvider, start: int = 0, end: int | None = None) -> None:
        if end is None:
            end = start
        if start < 0 or end < start:
            raise InvalidRangeError(start, end)
        self._provider = provider
        self._start = start
        self._end = end

    def __repr__(self) -> str:
        return f"TextRange(start={self._start}, end={self._end})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextRange):
            return NotImplemented
        return self.compare(other)

    # Endpoints

    @property
    def provider(self) -> TextPatternProvider:
        return self._provider

    @property
    def store(self) -> TextStore:
        return self._provider.store

    @property
    def start(self) -> int:
        return self._start

    @start.setter
    def start(self, value: int) -> None:
        if value < 0:
            raise InvalidRangeError(value, self._end)
        self._start = value
        if self._end < value:
            self._end = value

    @property
    def end(self) -> int:
        return self._end

    @end.setter
    def end(self, value: int) -> None:
        if value < 0:
            raise InvalidRangeError(self._start, value)
        self._end = value
        if self._start > value:
            self._start = value

    @property
    def is_degenerate(self) -> bool:
        return self._start == self._end

    def get_endpoint(self, endpoint: Endpoint) -> int:
        return self._start if endpoint is Endpoint.START else self._end

    def set_endpoint(self, endpoint: Endpoint, value: int) -> None:
        if endpoint is Endpoint.START:
            self.start = value
        else:
            self.end = value

    def _set_span(self, start: int, end: int) -> None:
        # start first, so that an end below the old start is never seen
        self.start = start
        self.end = end

    def with_span(self, start: int, end: int) -> TextRange:
        """Return a new range on the same provider."""
        return TextRange(self._provider, start, end)

    def validate_endpoints(self) -> None:
        """Check the range against the store's current length.

        Raises:
            OutOfStoreError: If either endpoint lies beyond the end of the text
        """
        length = self.store.length()
        if self._start > length or self._end > length:
            raise OutOfStoreError(self._start, self._end, length)

    # Identity and comparison

    def clone(self) -> TextRange:
        return TextRange(self._provider, self._start, self._end)

    def compare(self, other: TextRange) -> bool:
        """True if both ranges address the same span of the same store."""
        return (
            self.store is other.store
            and self._start == other._start
            and self._end == other._end
        )

    def compare_endpoints(
        self, endpoint: Endpoint, other: TextRange, other_endpoint: Endpoint
    ) -> int:
        """Signed distance from ``other``'s endpoint to this range's endpoint.

        Negative means this endpoint is before the other one, zero equal,
        positive after.

        Raises:
            InvalidArgumentError: If the ranges belong to different stores
        """
        self._check_same_store(other)
        return self.get_endpoint(endpoint) - other.get_endpoint(other_endpoint)

    def _check_same_store(self, other: TextRange) -> None:
        if not isinstance(other, TextRange) or other.store is not self.store:
            raise InvalidArgumentError("Range belongs to a different text store")

    # Units

    def _word_breaker(self, unit: TextUnit) -> WordBreaker | None:
        if (
            unit is TextUnit.WORD
            and self._provider.settings.word_break_mode is WordBreakMode.SELECTION
        ):
            return self._provider.word_breaker
        return None

    def expand_to_enclosing_unit(self, unit: TextUnit | str) -> None:
        """Grow the range to cover whole units.

        Args:
            unit: Unit to expand to

        Raises:
            UnsupportedUnitError: If ``unit`` is not a text unit
            OutOfStoreError: If the range is stale
        """
        unit = TextUnit.coerce(unit)
        self.validate_endpoints()
        store = self.store
        length = store.length()

        match unit:
            case TextUnit.CHARACTER:
                if self.is_degenerate:
                    self.end = min(self._end + 1, length)
            case TextUnit.WORD:
                breaker = self._word_breaker(unit)
                if breaker is not None:
                    self._expand_with_breaker(store.get_text(), breaker)
                else:
                    self._expand_by_predicate(store.get_text(), at_word_boundary)
            case TextUnit.PARAGRAPH:
                self._expand_by_predicate(store.get_text(), at_paragraph_boundary)
            case TextUnit.LINE:
                if store.line_count() > 1:
                    first = store.line_from_offset(self._start)
                    last = store.line_from_offset(self._end)
                    self._set_span(store.offset_of_line(first), store.offset_of_line(last + 1))
                else:
                    self._set_span(0, length)
            case TextUnit.FORMAT:
                char_start, char_end = enclosing_format_run(
                    store, self._start, self._end, AttributeLevel.CHARACTER
                )
                para_start, para_end = enclosing_format_run(
                    store, self._start, self._end, AttributeLevel.PARAGRAPH
                )
                self._set_span(max(char_start, para_start), min(char_end, para_end))
            case TextUnit.PAGE | TextUnit.DOCUMENT:
                self._set_span(0, length)
            case _:
                raise UnsupportedUnitError(unit)

    def _expand_by_predicate(self, text: str, at_boundary: Callable[[str, int], bool]) -> None:
        start = self._start
        while not at_boundary(text, start):
            start -= 1
        end = min(max(self._end, start + 1), len(text))
        while not at_boundary(text, end):
            end += 1
        self._set_span(start, end)

    def _expand_with_breaker(self, text: str, breaker: WordBreaker) -> None:
        start = self._start
        if not breaker.is_at_word_break(text, start):
            start = breaker.previous_word_break(text, start) or 0
        end = self._end
        if end == self._start or not breaker.is_at_word_break(text, end):
            next_break = breaker.next_word_break(text, end)
            end = len(text) if next_break is None else next_break
        self._set_span(start, end)

    def move(self, unit: TextUnit | str, count: int) -> int:
        """Collapse the range and move it by ``count`` units.

        A positive count collapses to ``end`` first, a negative count to
        ``start``. The result is degenerate.

        Returns:
            Units actually moved, with the sign of ``count``
        """
        unit = TextUnit.coerce(unit)
        if count == 0:
            return 0
        self.validate_endpoints()

        origin = self._end if count > 0 else self._start
        text = self._snapshot_for(unit)
        offset, moved = move_offset(
            self.store, text, origin, unit, count, self._word_breaker(unit)
        )
        self._set_span(offset, offset)
        logger.debug("Moved %d of %d %s units to %d", moved, count, unit.value, offset)
        return moved if offset != origin else 0

    def move_endpoint_by_unit(self, endpoint: Endpoint, unit: TextUnit | str, count: int) -> int:
        """Move one endpoint by ``count`` units without collapsing the range.

        Returns:
            Units actually moved, or 0 if the endpoint did not change
        """
        unit = TextUnit.coerce(unit)
        if count == 0:
            return 0
        self.validate_endpoints()

        origin = self.get_endpoint(endpoint)
        text = self._snapshot_for(unit)
        offset, moved = move_offset(
            self.store, text, origin, unit, count, self._word_breaker(unit)
        )
        if offset == origin:
            return 0
        self.set_endpoint(endpoint, offset)
        return moved

    def move_endpoint_by_range(
        self, endpoint: Endpoint, other: TextRange, other_endpoint: Endpoint
    ) -> None:
        """Set one endpoint to an endpoint of another range of the same store."""
        self._check_same_store(other)
        self.set_endpoint(endpoint, other.get_endpoint(other_endpoint))

    def _snapshot_for(self, unit: TextUnit) -> str:
        if unit in (TextUnit.WORD, TextUnit.PARAGRAPH):
            return self.store.get_text()
        return ""

    # Search

    def find_text(
        self, text: str, backwards: bool = False, ignore_case: bool = False
    ) -> TextRange | None:
        """Find the first (or last) occurrence of ``text`` inside the range.

        Args:
            text: Text to look for
            backwards: Return the last occurrence instead of the first
            ignore_case: Match occurrences that differ only in case

        Returns:
            A new range covering the match, or None

        Raises:
            InvalidArgumentError: If ``text`` is None or empty
        """
        if not text:
            raise InvalidArgumentError("Search text must be a non-empty string")
        self.validate_endpoints()
        haystack = self.store.get_text(self._start, self._end)

        if ignore_case:
            span = _find_ignoring_case(haystack, text, backwards)
        else:
            index = haystack.rfind(text) if backwards else haystack.find(text)
            span = None if index < 0 else (index, index + len(text))

        if span is None:
            return None
        return self.with_span(self._start + span[0], self._start + span[1])

    def find_attribute(
        self, attribute: TextAttribute | str, value: Any, backwards: bool = False
    ) -> TextRange | None:
        """Find the first run of text inside the range where ``attribute`` equals ``value``.

        See :class:`~python_textpattern.runs.AttributeRunFinder`.
        """
        from .runs import AttributeRunFinder

        return AttributeRunFinder(self).find(attribute, value, backwards)

    # Reads

    def get_attribute_value(self, attribute: TextAttribute | str) -> AttrValue:
        attribute = TextAttribute.from_name(attribute)
        self.validate_endpoints()
        return self.store.attribute_at(self._start, self._end, attribute)

    def get_bounding_rectangles(self) -> list[Rect]:
        """Screen rectangles covering the visible part of the range, one per line."""
        self.validate_endpoints()
        return GeometryProjector(self.store).bounding_rectangles(self._start, self._end)

    def get_enclosing_element(self) -> TextPatternProvider:
        return self._provider

    def get_children(self) -> list[Any]:
        # No embedded child elements are exposed
        return []

    def get_text(self, max_length: int = -1) -> str:
        """Text of the range, truncated to ``max_length`` characters if that is non-negative."""
        self.validate_endpoints()
        text = self.store.get_text(self._start, self._end)
        if max_length < 0 or len(text) <= max_length:
            return text
        return text[:max_length]

    # Side effects

    def select(self) -> None:
        self.validate_endpoints()
        store = self.store
        store.set_focus()
        store.set_selection(self._start, self._end)

    def scroll_into_view(self, align_to_top: bool = True) -> None:
        """Scroll the host so the range is visible.

        In a multi-line store the start line becomes the first visible line,
        or with ``align_to_top=False`` the end line becomes the last visible
        one. A single-line store scrolls horizontally to ``start``.
        """
        self.validate_endpoints()
        store = self.store
        store.set_focus()
        if store.is_multiline():
            if align_to_top:
                line = store.line_from_offset(self._start)
            else:
                line = max(0, store.line_from_offset(self._end) - store.lines_per_page() + 1)
            store.scroll_to_line(line)
        else:
            store.scroll_offset_into_view(self._start)

    def add_to_selection(self) -> None:
        raise UnsupportedOperationError("add_to_selection")

    def remove_from_selection(self) -> None:
        raise UnsupportedOperationError("remove_from_selection")


def _find_ignoring_case(haystack: str, needle: str, backwards: bool) -> tuple[int, int] | None:
    # Match against the original text so offsets stay valid even where
    # case mapping would change string lengths.
    pattern = re.compile(re.escape(needle), re.IGNORECASE)
    if not backwards:
        match = pattern.search(haystack)
        return None if match is None else match.span()
    for position in range(len(haystack), -1, -1):
        match = pattern.match(haystack, position)
        if match is not None:
            return match.span()
    return None
