"""
Tests for per-unit movement functions and format-run navigation.
"""

import pytest
from lxml import etree

from python_textpattern import Endpoint, TextPatternProvider, TextRange, TextUnit
from python_textpattern.constants import WORD_NAMESPACE
from python_textpattern.docx_store import DocxTextStore
from python_textpattern.errors import UnsupportedUnitError
from python_textpattern.movement import (
    enclosing_format_run,
    move_backward,
    move_forward,
    move_offset,
)
from python_textpattern.store import PlainTextStore
from python_textpattern.types import AttributeLevel


def w(tag: str) -> str:
    return f"{{{WORD_NAMESPACE}}}{tag}"


def create_paragraph(*runs: tuple[str, bool], align: str | None = None) -> etree._Element:
    """Helper to create a w:p element from (text, bold) pairs."""
    p = etree.Element(w("p"))
    if align:
        ppr = etree.SubElement(p, w("pPr"))
        etree.SubElement(ppr, w("jc")).set(w("val"), align)
    for text, bold in runs:
        r = etree.SubElement(p, w("r"))
        if bold:
            etree.SubElement(etree.SubElement(r, w("rPr")), w("b"))
        etree.SubElement(r, w("t")).text = text
    return p


def create_provider() -> TextPatternProvider:
    """'Hello world\\nSecond' with character runs at 6 and paragraph runs at 12."""
    store = DocxTextStore(
        [
            create_paragraph(("Hello ", True), ("world", False)),
            create_paragraph(("Second", False), align="center"),
        ]
    )
    return TextPatternProvider(store)


class TestMoveFunctions:
    """Tests for the pure movement functions."""

    def test_character(self):
        store = PlainTextStore("hello")
        assert move_forward(store, "", 1, TextUnit.CHARACTER, 2) == (3, 2)
        assert move_backward(store, "", 1, TextUnit.CHARACTER, -4) == (0, -1)

    def test_word_uses_snapshot(self):
        store = PlainTextStore("hello world")
        assert move_forward(store, "hello world", 0, TextUnit.WORD, 1) == (5, 1)
        assert move_backward(store, "hello world", 11, TextUnit.WORD, -1) == (6, -1)

    def test_paragraph(self):
        text = "one\ntwo"
        store = PlainTextStore(text)
        assert move_forward(store, text, 0, TextUnit.PARAGRAPH, 3) == (7, 2)
        assert move_backward(store, text, 7, TextUnit.PARAGRAPH, -1) == (4, -1)

    def test_document(self):
        store = PlainTextStore("hello")
        assert move_forward(store, "", 2, TextUnit.DOCUMENT, 3) == (5, 1)
        assert move_forward(store, "", 5, TextUnit.DOCUMENT, 3) == (5, 0)
        assert move_backward(store, "", 2, TextUnit.PAGE, -3) == (0, -1)
        assert move_backward(store, "", 0, TextUnit.PAGE, -3) == (0, 0)

    def test_move_offset_dispatch(self):
        store = PlainTextStore("hello")
        assert move_offset(store, "", 2, TextUnit.CHARACTER, 1) == (3, 1)
        assert move_offset(store, "", 2, TextUnit.CHARACTER, -1) == (1, -1)
        assert move_offset(store, "", 2, TextUnit.CHARACTER, 0) == (2, 0)

    def test_rejects_non_unit(self):
        store = PlainTextStore("hello")
        with pytest.raises(UnsupportedUnitError):
            move_forward(store, "", 0, "sentence", 1)


class TestFormatMovement:
    """Format-unit steps take the nearer of the character and paragraph boundaries."""

    def test_forward_steps(self):
        provider = create_provider()
        rng = TextRange(provider, 0, 0)
        stops = []
        while rng.move(TextUnit.FORMAT, 1) == 1:
            stops.append(rng.start)
        assert stops == [6, 12, 18]

    def test_forward_reports_available_steps(self):
        rng = TextRange(create_provider(), 0, 0)
        assert rng.move(TextUnit.FORMAT, 5) == 3
        assert (rng.start, rng.end) == (18, 18)

    def test_backward(self):
        """From the end, paragraph 12 wins the first step, character 6 the second."""
        rng = TextRange(create_provider(), 18, 18)
        assert rng.move(TextUnit.FORMAT, -2) == -2
        assert (rng.start, rng.end) == (6, 6)

    def test_endpoint_by_format(self):
        rng = TextRange(create_provider(), 0, 0)
        assert rng.move_endpoint_by_unit(Endpoint.END, TextUnit.FORMAT, 2) == 2
        assert rng.get_text() == "Hello world\n"


class TestFormatExpansion:
    """Format expansion is the overlap of the enclosing character and paragraph runs."""

    def test_expand_inside_character_run(self):
        rng = TextRange(create_provider(), 8, 8)
        rng.expand_to_enclosing_unit(TextUnit.FORMAT)
        assert (rng.start, rng.end) == (6, 12)

    def test_expand_at_start(self):
        rng = TextRange(create_provider(), 2, 2)
        rng.expand_to_enclosing_unit(TextUnit.FORMAT)
        assert rng.get_text() == "Hello "

    def test_expand_second_paragraph(self):
        rng = TextRange(create_provider(), 14, 15)
        rng.expand_to_enclosing_unit(TextUnit.FORMAT)
        assert (rng.start, rng.end) == (12, 18)


class TestEnclosingFormatRun:
    """Tests for enclosing_format_run."""

    def test_character_level(self):
        store = create_provider().store
        assert enclosing_format_run(store, 8, 8, AttributeLevel.CHARACTER) == (6, 18)
        assert enclosing_format_run(store, 3, 8, AttributeLevel.CHARACTER) == (0, 18)

    def test_paragraph_level(self):
        store = create_provider().store
        assert enclosing_format_run(store, 8, 8, AttributeLevel.PARAGRAPH) == (0, 12)

    def test_caret_at_end_takes_last_run(self):
        store = create_provider().store
        assert enclosing_format_run(store, 18, 18, AttributeLevel.CHARACTER) == (6, 18)

    def test_empty_store(self):
        assert enclosing_format_run(PlainTextStore(""), 0, 0, AttributeLevel.CHARACTER) == (0, 0)
