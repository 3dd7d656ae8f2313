"""
Tests for bounding rectangle projection.
"""

from lxml import etree

from python_textpattern import TextPatternProvider, TextPatternSettings, TextRange
from python_textpattern.constants import WORD_NAMESPACE
from python_textpattern.docx_store import DocxTextStore
from python_textpattern.geometry import GeometryProjector
from python_textpattern.layout import LayoutMetrics
from python_textpattern.store import PlainTextStore
from python_textpattern.types import Rect, rects_to_doubles


def w(tag: str) -> str:
    return f"{{{WORD_NAMESPACE}}}{tag}"


def create_paragraph(text: str) -> etree._Element:
    p = etree.Element(w("p"))
    r = etree.SubElement(p, w("r"))
    etree.SubElement(r, w("t")).text = text
    return p


def create_docx_store(metrics: LayoutMetrics | None = None) -> DocxTextStore:
    """'Hello world\\nSecond' as an attributed store."""
    return DocxTextStore([create_paragraph("Hello world"), create_paragraph("Second")], metrics)


class TestSingleLine:
    """A single-line control reports one rectangle as tall as the client area."""

    def test_rect_spans_client_height(self):
        store = PlainTextStore("hello", multiline=False)
        assert GeometryProjector(store).bounding_rectangles(1, 3) == [Rect(8, 0, 16, 480)]

    def test_screen_origin_applied(self):
        store = PlainTextStore("hello", LayoutMetrics(screen_x=100, screen_y=50), multiline=False)
        assert GeometryProjector(store).bounding_rectangles(1, 3) == [Rect(108, 50, 16, 480)]

    def test_degenerate_span(self):
        store = PlainTextStore("hello", multiline=False)
        assert GeometryProjector(store).bounding_rectangles(2, 2) == []

    def test_clipped_to_client(self):
        store = PlainTextStore("abcdefgh", LayoutMetrics(client_width=40), multiline=False)
        assert GeometryProjector(store).bounding_rectangles(3, 8) == [Rect(24, 0, 16, 480)]


class TestMultiline:
    """A multi-line control reports one rectangle per visible line."""

    def test_one_rect_per_line(self):
        store = PlainTextStore("ab\ncd")
        assert GeometryProjector(store).bounding_rectangles(1, 4) == [
            Rect(8, 0, 8, 16),
            Rect(0, 16, 8, 16),
        ]

    def test_line_break_only_is_empty(self):
        store = PlainTextStore("ab\ncd")
        assert GeometryProjector(store).bounding_rectangles(2, 3) == []

    def test_only_visible_lines(self):
        store = PlainTextStore("a\nb\nc\nd", LayoutMetrics(client_height=32))
        projector = GeometryProjector(store)
        assert projector.bounding_rectangles(0, 7) == [Rect(0, 0, 8, 16), Rect(0, 16, 8, 16)]

        store.scroll_to_line(2)
        assert projector.bounding_rectangles(0, 7) == [Rect(0, 0, 8, 16), Rect(0, 16, 8, 16)]
        assert projector.bounding_rectangles(0, 3) == []

    def test_range_reads_through_projector(self):
        provider = TextPatternProvider.for_text("ab\ncd")
        assert TextRange(provider, 1, 4).get_bounding_rectangles() == [
            Rect(8, 0, 8, 16),
            Rect(0, 16, 8, 16),
        ]


class TestCornerProbing:
    """Attributed stores are probed per line by corner positions."""

    def test_fully_visible_lines(self):
        store = create_docx_store()
        assert GeometryProjector(store).bounding_rectangles(0, 18) == [
            Rect(0, 0, 88, 16),
            Rect(0, 16, 48, 16),
        ]

    def test_right_edge_clipped(self):
        """With the right corners outside, the line reaches the client edge."""
        store = create_docx_store(LayoutMetrics(client_width=40))
        assert GeometryProjector(store).bounding_rectangles(0, 18) == [
            Rect(0, 0, 40, 16),
            Rect(0, 16, 40, 16),
        ]

    def test_span_shrinks_until_corner_visible(self):
        """Both ends are scrolled out, so the line gets the full client width."""
        store = create_docx_store(LayoutMetrics(client_width=40))
        store.layout.scroll_to_column(2)
        assert GeometryProjector(store).bounding_rectangles(0, 11) == [Rect(0, 0, 40, 16)]

    def test_clamped_to_visible_range(self):
        store = create_docx_store(LayoutMetrics(client_height=16))
        assert GeometryProjector(store).bounding_rectangles(0, 18) == [Rect(0, 0, 88, 16)]

    def test_offscreen_range(self):
        store = create_docx_store(LayoutMetrics(client_height=16))
        assert GeometryProjector(store).bounding_rectangles(13, 18) == []

    def test_screen_origin_applied(self):
        store = create_docx_store(LayoutMetrics(screen_x=10, screen_y=20))
        assert GeometryProjector(store).bounding_rectangles(12, 18) == [Rect(10, 36, 48, 16)]


def test_rects_to_doubles():
    rects = [Rect(8, 0, 8, 16), Rect(0, 16, 8, 16)]
    assert rects_to_doubles(rects) == [8, 0, 8, 16, 0, 16, 8, 16]


def test_provider_settings_drive_layout():
    settings = TextPatternSettings(layout=LayoutMetrics(char_width=10, line_height=20))
    provider = TextPatternProvider.for_text("abc", settings=settings)
    assert provider.document_range.get_bounding_rectangles() == [Rect(0, 0, 30, 20)]
