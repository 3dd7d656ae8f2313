"""
Walks runs of uniform attribute value inside a text range.

Paragraph-level attributes are walked by paragraph-format runs and
character-level attributes by character-format runs. Runs are clipped to the
range, so the first and last run may be partial.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .attributes import AttrValue, TextAttribute, value_matches

if TYPE_CHECKING:
    from .range import TextRange


@dataclass(frozen=True)
class AttributeRun:
    """A span of the range over which an attribute has one value.

    Attributes:
        start: Start offset in the store
        end: End offset in the store
        value: What the store reports for the attribute over [start, end)
    """

    start: int
    end: int
    value: AttrValue


class AttributeRunFinder:
    """Searches one range for runs of a given attribute value.

    Args:
        text_range: The range to search; it is not modified

    Example:
        >>> finder = AttributeRunFinder(provider.document_range)
        >>> finder.find(TextAttribute.FONT_WEIGHT, 700)
        TextRange(start=0, end=12)
    """

    def __init__(self, text_range: TextRange) -> None:
        self._range = text_range

    def iter_runs(self, attribute: TextAttribute, backwards: bool = False) -> Iterator[AttributeRun]:
        """Yield attribute runs from the near end of the range.

        Args:
            attribute: Attribute whose level picks the run granularity
            backwards: Start at ``end`` and walk toward ``start``
        """
        store = self._range.store
        start, end = self._range.start, self._range.end
        level = attribute.level

        if not backwards:
            position = start
            while position < end:
                boundary = store.next_format_boundary(position, level)
                run_end = end if boundary is None else min(boundary, end)
                yield AttributeRun(position, run_end, store.attribute_at(position, run_end, attribute))
                position = run_end
        else:
            position = end
            while position > start:
                boundary = store.next_format_boundary(position, level, backwards=True)
                run_start = start if boundary is None else max(boundary, start)
                yield AttributeRun(run_start, position, store.attribute_at(run_start, position, attribute))
                position = run_start

    def find(
        self, attribute: TextAttribute | str, value: Any, backwards: bool = False
    ) -> TextRange | None:
        """Find the nearest contiguous stretch where ``attribute`` has ``value``.

        Matching runs are accumulated from the first match until the first
        run that does not match.

        Args:
            attribute: Attribute to test
            value: Target value (sequences compare elementwise)
            backwards: Search from the end of the range

        Returns:
            A new range over the matching stretch, or None if nothing matched

        Raises:
            InvalidArgumentError: If ``attribute`` names no attribute
            OutOfStoreError: If the range is stale
        """
        attribute = TextAttribute.from_name(attribute)
        self._range.validate_endpoints()

        found: tuple[int, int] | None = None
        for run in self.iter_runs(attribute, backwards):
            if value_matches(run.value, value):
                if found is None:
                    found = (run.start, run.end)
                elif backwards:
                    found = (run.start, found[1])
                else:
                    found = (found[0], run.end)
            elif found is not None:
                break

        if found is None:
            return None
        return self._range.with_span(*found)


def iter_attribute_runs(
    text_range: TextRange, attribute: TextAttribute | str, backwards: bool = False
) -> list[AttributeRun]:
    """Return every attribute run of ``text_range`` in walk order.

    Raises:
        InvalidArgumentError: If ``attribute`` names no attribute
        OutOfStoreError: If the range is stale
    """
    attribute = TextAttribute.from_name(attribute)
    text_range.validate_endpoints()
    return list(AttributeRunFinder(text_range).iter_runs(attribute, backwards))
