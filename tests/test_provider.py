"""
Tests for TextPatternProvider: construction, loading and range sources.
"""

import io
import zipfile

import pytest

from python_textpattern import (
    DocumentLoadError,
    DocxTextStore,
    PlainTextStore,
    TextPatternProvider,
    TextPatternSettings,
    TextUnit,
    WordBreakMode,
)
from python_textpattern.constants import WORD_NAMESPACE
from python_textpattern.layout import LayoutMetrics
from python_textpattern.types import Point


def docx_bytes(*paragraphs: str) -> bytes:
    """Build an in-memory .docx with one plain run per paragraph."""
    body = "".join(f"<w:p><w:r><w:t>{text}</w:t></w:r></w:p>" for text in paragraphs)
    doc_xml = f'<w:document xmlns:w="{WORD_NAMESPACE}"><w:body>{body}</w:body></w:document>'
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("word/document.xml", doc_xml)
    return buffer.getvalue()


class TestConstruction:
    def test_for_text(self):
        provider = TextPatternProvider.for_text("hello")
        assert isinstance(provider.store, PlainTextStore)
        assert provider.settings.word_break_mode is WordBreakMode.HEURISTIC
        assert provider.supported_text_selection == "single"

    def test_for_text_uses_settings_layout(self):
        settings = TextPatternSettings(layout=LayoutMetrics(client_height=32))
        provider = TextPatternProvider.for_text("hello", settings=settings)
        assert provider.store.lines_per_page() == 2

    def test_for_docx_stream(self):
        provider = TextPatternProvider.for_docx(io.BytesIO(docx_bytes("One", "Two")))
        assert isinstance(provider.store, DocxTextStore)
        assert provider.document_range.get_text() == "One\nTwo"


class TestOpen:
    """Tests for opening files by suffix."""

    def test_open_text_file(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("line one\nline two", encoding="utf-8")

        provider = TextPatternProvider.open(path)

        assert isinstance(provider.store, PlainTextStore)
        assert provider.store.line_count() == 2

    def test_open_docx(self, tmp_path):
        path = tmp_path / "doc.docx"
        path.write_bytes(docx_bytes("Hello"))

        provider = TextPatternProvider.open(str(path))

        assert isinstance(provider.store, DocxTextStore)
        assert provider.document_range.get_text() == "Hello"

    def test_missing_text_file(self, tmp_path):
        with pytest.raises(DocumentLoadError, match="not found"):
            TextPatternProvider.open(tmp_path / "missing.txt")

    def test_missing_docx(self, tmp_path):
        with pytest.raises(DocumentLoadError, match="not found"):
            TextPatternProvider.open(tmp_path / "missing.docx")

    def test_undecodable_text_file(self, tmp_path):
        path = tmp_path / "binary.txt"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(DocumentLoadError, match="Failed to read"):
            TextPatternProvider.open(path)


class TestRanges:
    """Tests for the ranges a provider hands out."""

    def test_document_range(self):
        provider = TextPatternProvider.for_text("hello world")
        rng = provider.document_range
        assert (rng.start, rng.end) == (0, 11)
        assert rng.provider is provider

    def test_document_range_tracks_length(self):
        provider = TextPatternProvider.for_text("hello world")
        provider.store.set_text("hi")
        assert provider.document_range.end == 2

    def test_selection(self):
        provider = TextPatternProvider.for_text("hello world")
        provider.store.set_selection(2, 7)
        (selection,) = provider.get_selection()
        assert (selection.start, selection.end) == (2, 7)

    def test_visible_ranges(self):
        settings = TextPatternSettings(layout=LayoutMetrics(client_height=32))
        provider = TextPatternProvider.for_text("a\nb\nc\nd", settings=settings)
        (visible,) = provider.get_visible_ranges()
        assert visible.get_text() == "a\nb\n"

    def test_visible_ranges_clamped_to_story(self):
        provider = TextPatternProvider.for_text("a\nb")
        (visible,) = provider.get_visible_ranges()
        assert (visible.start, visible.end) == (0, 3)

    def test_range_from_point(self):
        provider = TextPatternProvider.for_text("ab\ncd")
        rng = provider.range_from_point(Point(9, 20))
        assert (rng.start, rng.end) == (4, 4)

    def test_range_from_point_screen_origin(self):
        settings = TextPatternSettings(layout=LayoutMetrics(screen_x=100, screen_y=50))
        provider = TextPatternProvider.for_text("ab\ncd", settings=settings)
        rng = provider.range_from_point(Point(109, 70))
        assert rng.start == 4


class TestWordBreakerLifecycle:
    """The provider's word breaker follows the store's text changes."""

    def test_text_change_bumps_generation(self):
        provider = TextPatternProvider.for_text("hello")
        provider.store.set_text("bye")
        assert provider.word_breaker.generation == 1

    def test_close_unsubscribes(self):
        provider = TextPatternProvider.for_text("hello")
        provider.close()
        provider.store.set_text("bye")
        assert provider.word_breaker.generation == 0

    def test_selection_mode_word_movement(self):
        settings = TextPatternSettings(word_break_mode=WordBreakMode.SELECTION, break_window=1)
        provider = TextPatternProvider.for_text("one two three", settings=settings)
        rng = provider.document_range.with_span(0, 0)
        assert rng.move(TextUnit.WORD, 2) == 2
        assert rng.start == 8
