"""
Centralized constants for namespaces, special characters and defaults.

Import from here so that the stores, the classifier and the CLI agree on
the same magic values.
"""

# =============================================================================
# Word Processing Namespaces
# =============================================================================

# Main WordprocessingML namespace (Word 2007+)
WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# Basic namespace map with just the main Word namespace
NSMAP = {"w": WORD_NAMESPACE}

# Package part holding the main document story
DOCUMENT_PART = "word/document.xml"


# =============================================================================
# Special Characters
# =============================================================================

# Reserved private-use code point standing in for embedded objects (images, OLE)
EMBEDDED_OBJECT_CHAR = "\uf8ff"

# Paragraph separator used when flattening documents to a text snapshot
PARAGRAPH_SEPARATOR = "\n"

# Manual line break inside a paragraph (w:br, w:cr)
LINE_BREAK_CHAR = "\v"

# Characters that end a layout line
HARD_LINE_BREAKS = frozenset({"\n", "\v"})

# Characters that occupy no horizontal space in the layout
ZERO_WIDTH_CHARS = frozenset({"\n", "\v", "\r"})

# Apostrophes that do not split a word when surrounded by letters
APOSTROPHES = frozenset({"'", "\u2019"})


# =============================================================================
# Default/Magic Numbers
# =============================================================================

# Initial half-width of the word-break window around a query offset
DEFAULT_BREAK_WINDOW = 32

# Fixed-cell layout defaults (pixels)
DEFAULT_CHAR_WIDTH = 8
DEFAULT_LINE_HEIGHT = 16
DEFAULT_CLIENT_WIDTH = 640
DEFAULT_CLIENT_HEIGHT = 480


# =============================================================================
# Environment Variables
# =============================================================================

WORD_BREAKER_ENV = "TEXTPATTERN_WORD_BREAKER"
BREAK_WINDOW_ENV = "TEXTPATTERN_BREAK_WINDOW"


# =============================================================================
# Helper Functions
# =============================================================================


def w(tag: str) -> str:
    """Create a fully qualified Word namespace tag.

    Args:
        tag: Tag name without namespace prefix (e.g., "p", "r", "t")

    Returns:
        Fully qualified tag (e.g., "{http://...wordprocessingml/2006/main}p")

    Example:
        >>> w("p")
        '{http://schemas.openxmlformats.org/wordprocessingml/2006/main}p'
    """
    return f"{{{WORD_NAMESPACE}}}{tag}"
