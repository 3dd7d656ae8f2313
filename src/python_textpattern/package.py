"""
Read-only access to the parts of a .docx (OOXML ZIP) package.

Only reading is needed here: the package is opened, its parts are held in
memory, and XML parts are parsed on request.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO

from lxml import etree

from .errors import DocumentLoadError

logger = logging.getLogger(__name__)


class DocxPackage:
    """In-memory view of an OOXML package's parts.

    Example:
        >>> pkg = DocxPackage.open("document.docx")
        >>> body = pkg.get_part("word/document.xml")
    """

    def __init__(self, parts: dict[str, bytes], source_path: Path | None = None) -> None:
        """Initialize from already-read parts.

        Use the class methods `open()` or `from_bytes()` instead of
        calling this constructor directly.

        Args:
            parts: Mapping of part name to raw bytes
            source_path: Original source file path, if any
        """
        self._parts = parts
        self._source_path = source_path

    @classmethod
    def open(cls, source: str | Path | BinaryIO) -> "DocxPackage":
        """Open a package from a file path or file-like object.

        Args:
            source: Path to .docx file or file-like object containing it

        Returns:
            DocxPackage holding every part of the archive

        Raises:
            DocumentLoadError: If the source is missing or not a valid ZIP file
        """
        source_path: Path | None = None

        if isinstance(source, str | Path):
            source_path = Path(source)
            if not source_path.exists():
                raise DocumentLoadError(f"Document not found: {source_path}")
            zip_source: Path | BinaryIO = source_path
        else:
            zip_source = source

        if not zipfile.is_zipfile(zip_source):
            raise DocumentLoadError("Source must be a valid .docx (ZIP) file")

        # Reset stream position if it was checked by is_zipfile
        if hasattr(zip_source, "seek"):
            zip_source.seek(0)

        try:
            with zipfile.ZipFile(zip_source, "r") as zip_ref:
                parts = {name: zip_ref.read(name) for name in zip_ref.namelist()}
        except (zipfile.BadZipFile, OSError) as e:
            raise DocumentLoadError(f"Failed to read .docx file: {e}") from e

        logger.debug("Read %d parts from %s", len(parts), source_path or "stream")
        return cls(parts, source_path)

    @classmethod
    def from_bytes(cls, data: bytes) -> "DocxPackage":
        """Open a package from bytes."""
        return cls.open(io.BytesIO(data))

    @property
    def source_path(self) -> Path | None:
        return self._source_path

    def part_exists(self, part_name: str) -> bool:
        return part_name in self._parts

    def get_part(self, part_name: str) -> etree._Element | None:
        """Get a package part as a parsed XML element.

        Args:
            part_name: Relative path within the package (e.g., "word/document.xml")

        Returns:
            Parsed root element, or None if the part doesn't exist

        Raises:
            DocumentLoadError: If the part is not well-formed XML
        """
        data = self._parts.get(part_name)
        if data is None:
            return None
        parser = etree.XMLParser(remove_blank_text=False)
        try:
            return etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            raise DocumentLoadError(f"Malformed XML in {part_name}: {e}") from e
