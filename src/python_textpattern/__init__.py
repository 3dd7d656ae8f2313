"""
python_textpattern - Text ranges over plain and attributed text stores.

This package lets automation clients address, compare, move, search and
measure spans of a control's text as TextRange values. Ranges work the same
over a flat plain-text buffer and over attributed text loaded from Word
documents, including word and paragraph boundary detection, format-run
navigation and viewport-clipped bounding rectangles.

Example:
    >>> from python_textpattern import TextPatternProvider, TextUnit
    >>> provider = TextPatternProvider.for_text("hello world")
    >>> rng = provider.document_range.with_span(5, 5)
    >>> rng.expand_to_enclosing_unit(TextUnit.WORD)
    >>> (rng.start, rng.end)
    (5, 6)
"""

__version__ = "0.1.0"
__all__ = [
    "TextPatternProvider",
    "TextRange",
    "TextUnit",
    "Endpoint",
    "AttributeLevel",
    "Point",
    "Rect",
    "TextAttribute",
    "Uniform",
    "MIXED",
    "NOT_SUPPORTED",
    "TextStore",
    "PlainTextStore",
    "PlainTextFormat",
    "DocxTextStore",
    "LayoutMetrics",
    "WordBreaker",
    "AttributeRunFinder",
    "GeometryProjector",
    "TextPatternSettings",
    "WordBreakMode",
    "load_settings",
    "settings_from_env",
    "from_python_docx",
    # Errors
    "TextPatternError",
    "InvalidRangeError",
    "OutOfStoreError",
    "UnsupportedUnitError",
    "InvalidArgumentError",
    "UnsupportedOperationError",
    "SettingsError",
    "DocumentLoadError",
    # Export functionality
    "export_units",
    "export_units_json",
    "export_units_yaml",
    "export_units_markdown",
]

from .attributes import MIXED, NOT_SUPPORTED, TextAttribute, Uniform
from .breaker import WordBreaker

# Import compatibility helpers (python-docx integration)
from .compat import from_python_docx
from .config import TextPatternSettings, WordBreakMode, load_settings, settings_from_env
from .docx_store import DocxTextStore
from .errors import (
    DocumentLoadError,
    InvalidArgumentError,
    InvalidRangeError,
    OutOfStoreError,
    SettingsError,
    TextPatternError,
    UnsupportedOperationError,
    UnsupportedUnitError,
)

# Import export functionality
from .export import (
    export_units,
    export_units_json,
    export_units_markdown,
    export_units_yaml,
)
from .geometry import GeometryProjector
from .layout import LayoutMetrics
from .provider import TextPatternProvider
from .range import TextRange
from .runs import AttributeRunFinder
from .store import PlainTextFormat, PlainTextStore, TextStore
from .types import AttributeLevel, Endpoint, Point, Rect, TextUnit
