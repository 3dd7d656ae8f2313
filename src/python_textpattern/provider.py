"""
The provider boundary: where text ranges come from.

A provider wraps one text store with the engine settings and the word
breaker whose cache is invalidated by the store's text-changed notification.
Ranges hold a reference to their provider and reach the store through it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .breaker import WordBreaker
from .config import TextPatternSettings
from .docx_store import DocxTextStore
from .errors import DocumentLoadError
from .range import TextRange
from .store import PlainTextStore, TextStore
from .types import Point

logger = logging.getLogger(__name__)


class TextPatternProvider:
    """Exposes a text store to automation clients as text ranges.

    Args:
        store: The backing text store
        settings: Engine settings (defaults to :class:`TextPatternSettings`)

    Example:
        >>> provider = TextPatternProvider.for_text("Hello world")
        >>> provider.document_range.find_text("world")
        TextRange(start=6, end=11)
    """

    supported_text_selection = "single"

    def __init__(self, store: TextStore, settings: TextPatternSettings | None = None) -> None:
        self.store = store
        self.settings = settings or TextPatternSettings()
        self.word_breaker = WordBreaker(self.settings.break_window)
        store.subscribe(self.word_breaker.on_text_changed)

    @classmethod
    def for_text(
        cls,
        text: str,
        settings: TextPatternSettings | None = None,
        multiline: bool = True,
        **kwargs: Any,
    ) -> TextPatternProvider:
        """Create a provider over a plain-text store."""
        settings = settings or TextPatternSettings()
        store = PlainTextStore(text, settings.layout, multiline=multiline, **kwargs)
        return cls(store, settings)

    @classmethod
    def for_docx(
        cls, source: Any, settings: TextPatternSettings | None = None, read_only: bool = False
    ) -> TextPatternProvider:
        """Create a provider over the main story of a .docx file or stream."""
        settings = settings or TextPatternSettings()
        return cls(DocxTextStore.open(source, settings.layout, read_only=read_only), settings)

    @classmethod
    def open(cls, path: str | Path, settings: TextPatternSettings | None = None) -> TextPatternProvider:
        """Open a .docx file as an attributed store, or any other file as plain text.

        Raises:
            DocumentLoadError: If the file cannot be read
        """
        path = Path(path)
        if path.suffix.lower() == ".docx":
            return cls.for_docx(path, settings)
        if not path.exists():
            raise DocumentLoadError(f"Document not found: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentLoadError(f"Failed to read {path}: {e}") from e
        logger.debug("Loaded %s as plain text, %d characters", path, len(text))
        return cls.for_text(text, settings)

    def close(self) -> None:
        """Stop listening to the store's text-changed notification."""
        self.store.unsubscribe(self.word_breaker.on_text_changed)

    @property
    def document_range(self) -> TextRange:
        """A range over the whole story."""
        return TextRange(self, 0, self.store.length())

    def get_selection(self) -> list[TextRange]:
        """The current selection as a one-element list."""
        start, end = self.store.get_selection()
        return [TextRange(self, start, end)]

    def get_visible_ranges(self) -> list[TextRange]:
        """Ranges for the text in view (one range: the visible lines)."""
        start, end = self.store.visible_range()
        length = self.store.length()
        return [TextRange(self, min(start, length), min(end, length))]

    def range_from_point(self, point: Point) -> TextRange:
        """A degenerate range at the caret position nearest to a screen point."""
        offset = self.store.offset_from_point(point)
        return TextRange(self, offset, offset)
