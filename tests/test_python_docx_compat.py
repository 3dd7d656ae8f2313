"""Tests for python-docx compatibility.

These tests verify that stores built with from_python_docx() read the live
element tree of a python-docx Document.

Note: These tests are skipped if python-docx is not installed.
"""

import pytest

# Skip all tests if python-docx not installed
docx = pytest.importorskip("docx")
from docx import Document as PythonDocxDocument  # noqa: E402

from python_textpattern import (  # noqa: E402
    DocxTextStore,
    TextAttribute,
    TextPatternProvider,
    Uniform,
    from_python_docx,
)
from python_textpattern.attributes import HorizontalTextAlignment  # noqa: E402
from python_textpattern.layout import LayoutMetrics  # noqa: E402


class TestFromPythonDocx:
    """Test from_python_docx() conversion function."""

    def test_basic_conversion(self) -> None:
        """Can create a text store from a python-docx Document."""
        py_doc = PythonDocxDocument()
        py_doc.add_paragraph("Hello World")

        store = from_python_docx(py_doc)

        assert isinstance(store, DocxTextStore)
        assert "Hello World" in store.get_text()

    def test_paragraphs_become_lines(self) -> None:
        py_doc = PythonDocxDocument()
        py_doc.add_paragraph("First paragraph")
        py_doc.add_paragraph("Second paragraph")

        store = from_python_docx(py_doc)

        assert "First paragraph\nSecond paragraph" in store.get_text()

    def test_bold_run_is_findable(self) -> None:
        """Run formatting set through python-docx is visible to attribute search."""
        py_doc = PythonDocxDocument()
        paragraph = py_doc.add_paragraph("Payment terms: ")
        paragraph.add_run("30 days").bold = True

        provider = TextPatternProvider(from_python_docx(py_doc))
        found = provider.document_range.find_attribute(TextAttribute.FONT_WEIGHT, 700)

        assert found is not None
        assert found.get_text() == "30 days"

    def test_alignment(self) -> None:
        from docx.enum.text import WD_ALIGN_PARAGRAPH

        py_doc = PythonDocxDocument()
        paragraph = py_doc.add_paragraph("Centered title")
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER

        store = from_python_docx(py_doc)
        start = store.get_text().index("Centered")

        assert store.attribute_at(
            start, start + 8, TextAttribute.HORIZONTAL_TEXT_ALIGNMENT
        ) == Uniform(HorizontalTextAlignment.CENTERED)

    def test_options_passed_through(self) -> None:
        py_doc = PythonDocxDocument()
        py_doc.add_paragraph("Locked")

        store = from_python_docx(py_doc, LayoutMetrics(client_width=100), read_only=True)

        assert store.client_rect().width == 100
        assert store.attribute_at(0, 1, TextAttribute.IS_READ_ONLY) == Uniform(True)

    def test_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError, match="Expected python-docx Document"):
            from_python_docx("not a document")
