"""
Attributed text store backed by WordprocessingML paragraphs.

The store flattens a sequence of <w:p> elements into one text snapshot:
paragraphs are joined with a line feed, tabs and manual breaks become
control characters, and drawings become the embedded-object marker. Text
inside tracked deletions is not part of the snapshot.

Alongside the text it keeps two run tables: maximal spans of equal character
formatting and maximal spans of consecutive paragraphs with equal paragraph
formatting. Attribute queries and format-unit movement both work off these.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

from lxml import etree

from .attributes import (
    FONT_WEIGHT_BOLD,
    FONT_WEIGHT_NORMAL,
    NOT_SUPPORTED,
    AttrValue,
    TextAttribute,
    Uniform,
    merge_values,
)
from .constants import (
    DOCUMENT_PART,
    EMBEDDED_OBJECT_CHAR,
    LINE_BREAK_CHAR,
    PARAGRAPH_SEPARATOR,
)
from .constants import w as _w
from .errors import DocumentLoadError
from .formatting import ParagraphFormat, RunFormat
from .layout import LayoutMetrics
from .package import DocxPackage
from .store import BaseTextStore
from .types import AttributeLevel

logger = logging.getLogger(__name__)

DEFAULT_FONT_NAME = "Calibri"
DEFAULT_FONT_SIZE = 11.0
DEFAULT_BACKGROUND = 0xFFFFFF
DEFAULT_FOREGROUND = 0x000000

_OBJECT_TAGS = frozenset({_w("drawing"), _w("pict"), _w("object")})
_BREAK_TAGS = frozenset({_w("br"), _w("cr")})


def _is_run_in_deletion(run: etree._Element) -> bool:
    """Check if a run is inside a tracked deletion wrapper (w:del or w:moveFrom)."""
    parent = run.getparent()
    while parent is not None:
        if parent.tag in (_w("del"), _w("moveFrom")):
            return True
        parent = parent.getparent()
    return False


def _owning_paragraph(elem: etree._Element) -> etree._Element | None:
    parent = elem.getparent()
    while parent is not None and parent.tag != _w("p"):
        parent = parent.getparent()
    return parent


def _get_run_text(run: etree._Element) -> str:
    """Extract the visible text of a run, in document order.

    Args:
        run: A w:r (run) Element

    Returns:
        Text with tabs, manual breaks and embedded objects mapped to characters
    """
    pieces: list[str] = []
    for child in run:
        tag = child.tag
        if tag == _w("t"):
            pieces.append(child.text or "")
        elif tag == _w("tab"):
            pieces.append("\t")
        elif tag in _BREAK_TAGS:
            pieces.append(LINE_BREAK_CHAR)
        elif tag == _w("noBreakHyphen"):
            pieces.append("\u2011")
        elif tag in _OBJECT_TAGS:
            pieces.append(EMBEDDED_OBJECT_CHAR)
    return "".join(pieces)


@dataclass(frozen=True)
class FormatRun:
    """A maximal span [start, end) of uniform formatting."""

    start: int
    end: int
    fmt: Any


def _merge_runs(segments: list[FormatRun]) -> list[FormatRun]:
    merged: list[FormatRun] = []
    for seg in segments:
        if seg.end <= seg.start:
            continue
        if merged and merged[-1].fmt == seg.fmt and merged[-1].end == seg.start:
            merged[-1] = FormatRun(merged[-1].start, seg.end, seg.fmt)
        else:
            merged.append(seg)
    return merged


class DocxTextStore(BaseTextStore):
    """Text store over WordprocessingML paragraphs.

    Args:
        paragraphs: The <w:p> elements making up the story, in order
        metrics: Layout metrics (defaults to :class:`LayoutMetrics`)
        read_only: Report the whole story as read-only

    Example:
        >>> store = DocxTextStore.open("contract.docx")
        >>> store.attribute_at(0, 10, TextAttribute.FONT_WEIGHT)
        Uniform(value=700)
    """

    supports_corner_probing = True

    def __init__(
        self,
        paragraphs: Iterable[etree._Element] = (),
        metrics: LayoutMetrics | None = None,
        read_only: bool = False,
    ) -> None:
        self.read_only = read_only
        self._char_runs: list[FormatRun] = []
        self._para_runs: list[FormatRun] = []
        self._char_bounds: list[int] = [0]
        self._para_bounds: list[int] = [0]
        text = self._build(list(paragraphs))
        super().__init__(text, metrics, multiline=True)

    # Construction

    @classmethod
    def from_element(
        cls, root: etree._Element, metrics: LayoutMetrics | None = None, **kwargs: Any
    ) -> DocxTextStore:
        """Build a store from a w:document, w:body or single w:p element."""
        if root.tag == _w("p"):
            return cls([root], metrics, **kwargs)
        paragraphs = [p for p in root.iter(_w("p")) if _owning_paragraph(p) is None]
        return cls(paragraphs, metrics, **kwargs)

    @classmethod
    def open(
        cls, source: str | Path | BinaryIO, metrics: LayoutMetrics | None = None, **kwargs: Any
    ) -> DocxTextStore:
        """Load the main story of a .docx file.

        Raises:
            DocumentLoadError: If the file is unreadable or has no document part
        """
        return cls.from_package(DocxPackage.open(source), metrics, **kwargs)

    @classmethod
    def from_bytes(
        cls, data: bytes, metrics: LayoutMetrics | None = None, **kwargs: Any
    ) -> DocxTextStore:
        """Load the main story of an in-memory .docx file."""
        return cls.from_package(DocxPackage.from_bytes(data), metrics, **kwargs)

    @classmethod
    def from_package(
        cls, package: DocxPackage, metrics: LayoutMetrics | None = None, **kwargs: Any
    ) -> DocxTextStore:
        """Build a store from the document part of an opened package.

        Raises:
            DocumentLoadError: If the package has no document part
        """
        if not package.part_exists(DOCUMENT_PART):
            raise DocumentLoadError(f"Package has no {DOCUMENT_PART} part")
        root = package.get_part(DOCUMENT_PART)
        body = root.find(_w("body"))
        store = cls.from_element(body if body is not None else root, metrics, **kwargs)
        logger.debug(
            "Loaded %s: %d characters, %d format runs",
            package.source_path or "stream",
            store.length(),
            len(store.format_runs(AttributeLevel.CHARACTER)),
        )
        return store

    def set_paragraphs(self, paragraphs: Iterable[etree._Element]) -> None:
        """Replace the story and notify subscribers."""
        self._set_text(self._build(list(paragraphs)))

    def _build(self, paragraphs: list[etree._Element]) -> str:
        pieces: list[str] = []
        char_segments: list[FormatRun] = []
        para_segments: list[FormatRun] = []
        offset = 0

        for index, p in enumerate(paragraphs):
            if p.tag != _w("p"):
                raise DocumentLoadError(f"Expected w:p element, got {p.tag}")
            para_start = offset
            ppr = p.find(_w("pPr"))
            last_run_format: RunFormat | None = None

            for run in p.iter(_w("r")):
                if _owning_paragraph(run) is not p or _is_run_in_deletion(run):
                    continue
                run_text = _get_run_text(run)
                if not run_text:
                    continue
                fmt = RunFormat.extract(run.find(_w("rPr")))
                char_segments.append(FormatRun(offset, offset + len(run_text), fmt))
                pieces.append(run_text)
                offset += len(run_text)
                last_run_format = fmt

            if index < len(paragraphs) - 1:
                mark_rpr = ppr.find(_w("rPr")) if ppr is not None else None
                if mark_rpr is not None or last_run_format is None:
                    mark_format = RunFormat.extract(mark_rpr)
                else:
                    mark_format = last_run_format
                char_segments.append(FormatRun(offset, offset + 1, mark_format))
                pieces.append(PARAGRAPH_SEPARATOR)
                offset += 1

            para_segments.append(FormatRun(para_start, offset, ParagraphFormat.extract(ppr)))

        self._char_runs = _merge_runs(char_segments)
        self._para_runs = _merge_runs(para_segments)
        self._char_bounds = _bounds(self._char_runs)
        self._para_bounds = _bounds(self._para_runs)
        return "".join(pieces)

    # Formatting

    def format_runs(self, level: AttributeLevel) -> list[FormatRun]:
        """Maximal runs of uniform formatting at the given level."""
        return list(self._char_runs if level is AttributeLevel.CHARACTER else self._para_runs)

    def next_format_boundary(
        self, offset: int, level: AttributeLevel, backwards: bool = False
    ) -> int | None:
        bounds = self._char_bounds if level is AttributeLevel.CHARACTER else self._para_bounds
        if backwards:
            i = bisect_left(bounds, offset) - 1
            return bounds[i] if i >= 0 else None
        i = bisect_right(bounds, offset)
        return bounds[i] if i < len(bounds) else None

    def attribute_at(self, start: int, end: int, attribute: TextAttribute) -> AttrValue:
        runs = self._char_runs if attribute.level is AttributeLevel.CHARACTER else self._para_runs
        if not runs:
            return NOT_SUPPORTED
        if end > start:
            covering = [run for run in runs if run.start < end and run.end > start]
        else:
            covering = [run for run in runs if run.start <= start < run.end] or [runs[-1]]

        values = []
        for run in covering:
            if attribute.level is AttributeLevel.CHARACTER:
                value = self._character_value(attribute, run.fmt)
            else:
                value = self._paragraph_value(attribute, run.fmt)
            if value is NOT_SUPPORTED:
                return NOT_SUPPORTED
            values.append(value)
        return merge_values(values)

    def _character_value(self, attribute: TextAttribute, fmt: RunFormat) -> Any:
        match attribute:
            case TextAttribute.BACKGROUND_COLOR:
                return DEFAULT_BACKGROUND if fmt.background is None else fmt.background
            case TextAttribute.CAP_STYLE:
                return fmt.caps
            case TextAttribute.FONT_NAME:
                return fmt.font_name or DEFAULT_FONT_NAME
            case TextAttribute.FONT_SIZE:
                return fmt.font_size or DEFAULT_FONT_SIZE
            case TextAttribute.FONT_WEIGHT:
                return FONT_WEIGHT_BOLD if fmt.bold else FONT_WEIGHT_NORMAL
            case TextAttribute.FOREGROUND_COLOR:
                return DEFAULT_FOREGROUND if fmt.color is None else fmt.color
            case TextAttribute.IS_HIDDEN:
                return fmt.hidden
            case TextAttribute.IS_ITALIC:
                return fmt.italic
            case TextAttribute.IS_READ_ONLY:
                return self.read_only
            case TextAttribute.IS_SUBSCRIPT:
                return fmt.subscript
            case TextAttribute.IS_SUPERSCRIPT:
                return fmt.superscript
            case TextAttribute.OUTLINE_STYLES:
                return fmt.outline
            case TextAttribute.STRIKETHROUGH_STYLE:
                return fmt.strikethrough
            case TextAttribute.UNDERLINE_STYLE:
                return fmt.underline
            case _:
                return NOT_SUPPORTED

    def _paragraph_value(self, attribute: TextAttribute, fmt: ParagraphFormat) -> Any:
        match attribute:
            case TextAttribute.BULLET_STYLE:
                return fmt.bullet
            case TextAttribute.HORIZONTAL_TEXT_ALIGNMENT:
                return fmt.alignment
            case TextAttribute.INDENTATION_FIRST_LINE:
                return fmt.indent_first_line
            case TextAttribute.INDENTATION_LEADING:
                return fmt.indent_leading
            case TextAttribute.INDENTATION_TRAILING:
                return fmt.indent_trailing
            case TextAttribute.TABS:
                return fmt.tabs
            case _:
                return NOT_SUPPORTED


def _bounds(runs: list[FormatRun]) -> list[int]:
    if not runs:
        return [0]
    return [runs[0].start, *(run.end for run in runs)]
