"""
Cached word-break lookup over a text snapshot.

The breaker runs the word-selection automaton over a window around the
queried offset and caches the resulting sorted boundaries. The window starts
small and doubles until it brackets the query. A text-changed notification
bumps the breaker's generation, which invalidates the cache unconditionally.
"""

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass

from .classifier import break_text
from .constants import DEFAULT_BREAK_WINDOW

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreakCache:
    """Break offsets computed for one window of text.

    Attributes:
        window_start: First offset of the scanned window
        window_end: Offset just past the scanned window
        boundaries: Sorted absolute break offsets found in the window
        generation: Breaker generation the window was computed for
    """

    window_start: int
    window_end: int
    boundaries: tuple[int, ...]
    generation: int

    def brackets(self, offset: int, length: int) -> bool:
        """True if the boundaries decide every question about ``offset``.

        That needs a boundary strictly on each side of the offset, unless the
        window already reaches that edge of the text.
        """
        if not self.boundaries:
            return False
        low_ok = self.window_start == 0 or self.boundaries[0] < offset
        high_ok = self.window_end == length or self.boundaries[-1] > offset
        return low_ok and high_ok

    def covers(self, offset: int, length: int, generation: int) -> bool:
        return generation == self.generation and self.brackets(offset, length)


def _snap_window_start(text: str, start: int) -> int:
    while start > 0 and not text[start - 1].isspace():
        start -= 1
    return start


def _snap_window_end(text: str, end: int) -> int:
    while end < len(text) and not text[end].isspace():
        end += 1
    return end


class WordBreaker:
    """Word-break queries with a generation-checked window cache.

    Args:
        window: Initial half-width of the scanned window
        spelling: Break with the coarse automaton instead of the word-selection one
    """

    def __init__(self, window: int = DEFAULT_BREAK_WINDOW, spelling: bool = False) -> None:
        if window < 1:
            raise ValueError(f"Break window must be positive, got {window}")
        self._window = window
        self._spelling = spelling
        self._generation = 0
        self._cache: BreakCache | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def cache(self) -> BreakCache | None:
        """The most recently computed window, possibly stale."""
        return self._cache

    def on_text_changed(self) -> None:
        """Invalidate cached boundaries; subscribe this to the store."""
        self._generation += 1

    def boundaries_around(self, text: str, offset: int) -> BreakCache:
        """Return a valid cache window bracketing ``offset``, rebuilding if needed."""
        length = len(text)
        offset = min(max(offset, 0), length)
        cache = self._cache
        if cache is not None and cache.covers(offset, length, self._generation):
            return cache

        radius = self._window
        while True:
            start = _snap_window_start(text, max(0, offset - radius))
            end = _snap_window_end(text, min(length, offset + radius))
            cache = BreakCache(
                window_start=start,
                window_end=end,
                boundaries=self._compute(text, start, end),
                generation=self._generation,
            )
            if cache.brackets(offset, length):
                break
            radius *= 2

        logger.debug(
            "Rebuilt break cache [%d, %d) with %d boundaries (generation %d)",
            cache.window_start,
            cache.window_end,
            len(cache.boundaries),
            cache.generation,
        )
        self._cache = cache
        return cache

    def _compute(self, text: str, start: int, end: int) -> tuple[int, ...]:
        boundaries: list[int] = []
        if start == 0:
            boundaries.append(0)
        boundaries.extend(start + i for i in break_text(text[start:end], spelling=self._spelling))
        if end == len(text) and (not boundaries or boundaries[-1] != end):
            boundaries.append(end)
        return tuple(boundaries)

    def is_at_word_break(self, text: str, offset: int) -> bool:
        if offset <= 0 or offset >= len(text):
            return True
        boundaries = self.boundaries_around(text, offset).boundaries
        i = bisect_left(boundaries, offset)
        return i < len(boundaries) and boundaries[i] == offset

    def next_word_break(self, text: str, offset: int) -> int | None:
        """Return the first break strictly after ``offset``, or None at the end."""
        if offset >= len(text):
            return None
        boundaries = self.boundaries_around(text, offset).boundaries
        return boundaries[bisect_right(boundaries, offset)]

    def previous_word_break(self, text: str, offset: int) -> int | None:
        """Return the last break strictly before ``offset``, or None at the start."""
        if offset <= 0:
            return None
        boundaries = self.boundaries_around(text, offset).boundaries
        return boundaries[bisect_left(boundaries, offset) - 1]
