"""
Compatibility helpers for integrating with other libraries.

This module builds text stores from documents created with python-docx.
"""

from __future__ import annotations

from typing import Any

from .docx_store import DocxTextStore
from .layout import LayoutMetrics


def from_python_docx(
    python_docx_doc: Any,
    metrics: LayoutMetrics | None = None,
    read_only: bool = False,
) -> DocxTextStore:
    """Create a text store from a python-docx Document.

    The store reads the document's live element tree, so no save/reload
    round trip is needed.

    Args:
        python_docx_doc: A python-docx Document object
        metrics: Layout metrics for the store's geometry
        read_only: Report the story as read-only

    Returns:
        A DocxTextStore over the document body

    Raises:
        ImportError: If python-docx is not installed (with helpful message)
        TypeError: If the input is not a python-docx Document

    Example:
        >>> from docx import Document as PythonDocxDocument
        >>> from python_textpattern.compat import from_python_docx
        >>>
        >>> py_doc = PythonDocxDocument()
        >>> py_doc.add_paragraph("Payment terms: 30 days")
        >>> store = from_python_docx(py_doc)
        >>> store.get_text()
        'Payment terms: 30 days'
    """
    # Runtime check for python-docx
    try:
        from docx.document import Document as PythonDocxDocType
    except ImportError as e:
        raise ImportError(
            "python-docx is required for from_python_docx(). "
            "Install it with: pip install python-docx"
        ) from e

    if not isinstance(python_docx_doc, PythonDocxDocType):
        raise TypeError(
            f"Expected python-docx Document, got {type(python_docx_doc).__name__}. "
            "Pass a Document object created with: from docx import Document"
        )

    return DocxTextStore.from_element(
        python_docx_doc.element.body, metrics, read_only=read_only
    )
