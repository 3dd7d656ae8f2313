"""
Per-unit endpoint movement as pure functions.

Each mover takes the store, one text snapshot, a starting offset and a
signed count, and returns ``(new_offset, moved)`` without touching any
range. Callers decide what to do with the result, which keeps the
two-candidate format-run step free of aliasing.

Clamping at the store edges is not an error: it just reports fewer moves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .classifier import at_paragraph_boundary, at_word_boundary
from .errors import UnsupportedUnitError
from .types import AttributeLevel, TextUnit

if TYPE_CHECKING:
    from collections.abc import Callable

    from .breaker import WordBreaker
    from .store import TextStore


def _forward_by_predicate(
    text: str, index: int, count: int, at_boundary: Callable[[str, int], bool]
) -> tuple[int, int]:
    moved = 0
    while moved < count and index < len(text):
        index += 1
        while not at_boundary(text, index):
            index += 1
        moved += 1
    return index, moved


def _backward_by_predicate(
    text: str, index: int, count: int, at_boundary: Callable[[str, int], bool]
) -> tuple[int, int]:
    moved = 0
    while moved > count and index > 0:
        index -= 1
        while not at_boundary(text, index):
            index -= 1
        moved -= 1
    return index, moved


def _forward_by_breaker(
    text: str, index: int, count: int, breaker: WordBreaker
) -> tuple[int, int]:
    moved = 0
    while moved < count:
        nxt = breaker.next_word_break(text, index)
        if nxt is None:
            break
        index = nxt
        moved += 1
    return index, moved


def _backward_by_breaker(
    text: str, index: int, count: int, breaker: WordBreaker
) -> tuple[int, int]:
    moved = 0
    while moved > count:
        prev = breaker.previous_word_break(text, index)
        if prev is None:
            break
        index = prev
        moved -= 1
    return index, moved


def _line_forward(store: TextStore, index: int, count: int) -> tuple[int, int]:
    line = store.line_from_offset(index)
    line_count = store.line_count()
    moved = min(count, line_count - line - 1)
    if moved > 0:
        return store.offset_of_line(line + moved), moved
    if line_count == 1:
        # Nowhere to go on a single line except its end
        return store.length(), 1
    return index, 0


def _line_backward(store: TextStore, index: int, count: int) -> tuple[int, int]:
    line = store.line_from_offset(index)
    # From inside a line the first step lands on that line's own start
    inside = 0 if index == store.offset_of_line(line) else 1
    moved = max(count, -(line + inside))
    if moved == 0:
        return index, 0
    return store.offset_of_line(line + moved + inside), moved


def _format_step(store: TextStore, index: int, backwards: bool) -> int | None:
    # Character- and paragraph-format candidates are computed independently;
    # the smaller displacement wins.
    candidates = [
        c
        for c in (
            store.next_format_boundary(index, AttributeLevel.CHARACTER, backwards),
            store.next_format_boundary(index, AttributeLevel.PARAGRAPH, backwards),
        )
        if c is not None
    ]
    if not candidates:
        return None
    return max(candidates) if backwards else min(candidates)


def _format_move(store: TextStore, index: int, count: int) -> tuple[int, int]:
    step = 1 if count > 0 else -1
    moved = 0
    while moved != count:
        nxt = _format_step(store, index, backwards=step < 0)
        if nxt is None:
            break
        index = nxt
        moved += step
    return index, moved


def move_forward(
    store: TextStore,
    text: str,
    index: int,
    unit: TextUnit,
    count: int,
    breaker: WordBreaker | None = None,
) -> tuple[int, int]:
    """Move an offset forward by up to ``count`` (> 0) units.

    Args:
        store: Store the offset belongs to
        text: Text snapshot (only read for WORD and PARAGRAPH)
        index: Starting offset
        unit: Unit to move by
        count: Positive number of units
        breaker: Word breaker to use for WORD instead of the heuristic predicate

    Returns:
        Tuple of (new offset, units actually moved)

    Raises:
        UnsupportedUnitError: If the unit is not handled
    """
    match unit:
        case TextUnit.CHARACTER:
            moved = min(count, store.length() - index)
            return index + moved, moved
        case TextUnit.WORD:
            if breaker is not None:
                return _forward_by_breaker(text, index, count, breaker)
            return _forward_by_predicate(text, index, count, at_word_boundary)
        case TextUnit.PARAGRAPH:
            return _forward_by_predicate(text, index, count, at_paragraph_boundary)
        case TextUnit.LINE:
            return _line_forward(store, index, count)
        case TextUnit.FORMAT:
            return _format_move(store, index, count)
        case TextUnit.PAGE | TextUnit.DOCUMENT:
            length = store.length()
            return length, 1 if index < length else 0
        case _:
            raise UnsupportedUnitError(unit)


def move_backward(
    store: TextStore,
    text: str,
    index: int,
    unit: TextUnit,
    count: int,
    breaker: WordBreaker | None = None,
) -> tuple[int, int]:
    """Move an offset backward by up to ``-count`` units (``count`` < 0).

    Returns:
        Tuple of (new offset, units actually moved, as a negative number)

    Raises:
        UnsupportedUnitError: If the unit is not handled
    """
    match unit:
        case TextUnit.CHARACTER:
            moved = max(count, -index)
            return index + moved, moved
        case TextUnit.WORD:
            if breaker is not None:
                return _backward_by_breaker(text, index, count, breaker)
            return _backward_by_predicate(text, index, count, at_word_boundary)
        case TextUnit.PARAGRAPH:
            return _backward_by_predicate(text, index, count, at_paragraph_boundary)
        case TextUnit.LINE:
            return _line_backward(store, index, count)
        case TextUnit.FORMAT:
            return _format_move(store, index, count)
        case TextUnit.PAGE | TextUnit.DOCUMENT:
            return 0, -1 if index > 0 else 0
        case _:
            raise UnsupportedUnitError(unit)


def move_offset(
    store: TextStore,
    text: str,
    index: int,
    unit: TextUnit,
    count: int,
    breaker: WordBreaker | None = None,
) -> tuple[int, int]:
    """Dispatch to :func:`move_forward` or :func:`move_backward` by the sign of ``count``."""
    if count > 0:
        return move_forward(store, text, index, unit, count, breaker)
    if count < 0:
        return move_backward(store, text, index, unit, count, breaker)
    return index, 0


def enclosing_format_run(
    store: TextStore, start: int, end: int, level: AttributeLevel
) -> tuple[int, int]:
    """Span of the format runs at ``level`` covering [start, end).

    A degenerate span takes the run of the character at ``start``, or of
    the last character when ``start`` is the store length.
    """
    length = store.length()
    if length == 0:
        return 0, 0
    first = min(start, length - 1)
    last = max(min(end, length) - 1, first)
    run_start = store.next_format_boundary(first + 1, level, backwards=True)
    run_end = store.next_format_boundary(last, level)
    return (0 if run_start is None else run_start), (length if run_end is None else run_end)
