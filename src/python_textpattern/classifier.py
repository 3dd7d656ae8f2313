"""
Lexical classification and boundary detection for western-script text.

Two families of boundary logic live here:

- A table-driven lexer plus two finite automata that cut a text snapshot into
  tokens (:func:`break_text`). The word-selection automaton produces the
  offsets the :class:`~python_textpattern.breaker.WordBreaker` caches; the
  coarse automaton gives a spelling-style segmentation.
- The heuristic predicates :func:`at_word_boundary` and
  :func:`at_paragraph_boundary` that ranges use for word and paragraph
  navigation by default.

Neither does real linguistic segmentation; CJK runs come out as one token.
"""

import unicodedata
from dataclasses import dataclass
from enum import IntEnum

from .constants import APOSTROPHES


class LexClass(IntEnum):
    """Character classes consumed by the automata (0 means ignored)."""

    IGNORED = 0
    ALNUM = 1
    APOSTROPHE = 2
    PUNCTUATION = 3
    LINE_FEED = 4
    CARRIAGE_RETURN = 5
    SPACE = 6
    WIDE_SCRIPT = 7
    EMBEDDED_OBJECT = 8


def _build_ascii_table() -> tuple[int, ...]:
    table = [0] * 0x80
    for code in range(0x21, 0x7F):
        table[code] = LexClass.PUNCTUATION
    for code in [*range(0x30, 0x3A), *range(0x41, 0x5B), *range(0x61, 0x7B)]:
        table[code] = LexClass.ALNUM
    table[0x09] = LexClass.SPACE
    table[0x0A] = LexClass.LINE_FEED
    table[0x0D] = LexClass.CARRIAGE_RETURN
    table[0x20] = LexClass.SPACE
    table[0x27] = LexClass.APOSTROPHE
    return tuple(table)


def _build_fullwidth_table() -> tuple[int, ...]:
    # Indexed by the low byte of U+FF00..U+FF5F
    table = [LexClass.PUNCTUATION] * 0x60
    table[0x00] = LexClass.IGNORED
    table[0x07] = LexClass.APOSTROPHE
    for code in [*range(0x10, 0x1A), *range(0x21, 0x3B), *range(0x41, 0x5B)]:
        table[code] = LexClass.ALNUM
    table[0x5F] = LexClass.IGNORED
    return tuple(table)


_ASCII_TABLE = _build_ascii_table()
_FULLWIDTH_TABLE = _build_fullwidth_table()


def get_lex_class(ch: str) -> LexClass:
    """Classify a single character for the automata.

    Args:
        ch: A one-character string

    Returns:
        The character's lexical class
    """
    code = ord(ch)
    if code < 0x80:
        return LexClass(_ASCII_TABLE[code])
    if code < 0x2000:
        return LexClass.ALNUM
    if code < 0x3000:
        return LexClass.PUNCTUATION
    if code == 0xF8FF:
        return LexClass.EMBEDDED_OBJECT
    if 0xFF00 <= code < 0xFF60:
        return LexClass(_FULLWIDTH_TABLE[code & 0xFF])
    return LexClass.WIDE_SCRIPT


# Word-selection automaton. Rows are states, columns are lexical classes 1..8.
# Accepted token shapes:
#   A+(BA*)*F*     letters/digits with inner apostrophes and trailing spaces
#   (B|C)C*F*      punctuation with trailing spaces
#   (ED?)|D        one line break
#   F+             spaces
#   G+             wide-script run
#   H              one embedded object
_SELECTION_MACHINE = (
    (1, 4, 4, 7, 6, 8, 9, 10),
    (1, 2, -1, -1, -1, 3, -1, -1),
    (2, -1, -1, -1, -1, 3, -1, -1),
    (-1, -1, -1, -1, -1, 3, -1, -1),
    (-1, -1, 4, -1, -1, 5, -1, -1),
    (-1, -1, -1, -1, -1, 5, -1, -1),
    (-1, -1, -1, 7, -1, -1, -1, -1),
    (-1, -1, -1, -1, -1, -1, -1, -1),
    (-1, -1, -1, -1, -1, 8, -1, -1),
    (-1, -1, -1, -1, -1, -1, 9, -1),
    (-1, -1, -1, -1, -1, -1, -1, -1),
)

# Coarse automaton: state 1 keeps western text, inline punctuation and spaces
# together; state 2 groups line breaks, wide script and embedded objects.
_SPELLING_MACHINE = (
    (1, 1, 1, 2, 2, 1, 2, 2),
    (1, 1, 1, -1, -1, 1, -1, -1),
    (-1, -1, -1, 2, 2, -1, 2, 2),
)

_SPELLABLE_STATE = 1


@dataclass(frozen=True)
class Token:
    """One accepted run of the automaton.

    Attributes:
        start: Offset of the first classified character
        end: Offset just past the last accepted character
        spellable: Whether the coarse automaton saw western text in the run
    """

    start: int
    end: int
    spellable: bool = False


def _scan(text: str, index: int, machine: tuple[tuple[int, ...], ...]) -> Token | None:
    state = 0
    begin = -1
    last = -1
    spellable = False
    while index < len(text):
        lex = get_lex_class(text[index])
        if lex != LexClass.IGNORED:
            if begin == -1:
                begin = index
            state = machine[state][lex - 1]
            if state == -1:
                break
            if state == _SPELLABLE_STATE:
                spellable = True
            last = index
        index += 1
    if begin == -1:
        return None
    return Token(begin, last + 1, spellable)


def scan_selection_token(text: str, index: int) -> Token | None:
    """Scan one word-selection token starting at ``index``.

    Ignored characters before the token are skipped. Returns None when no
    classifiable character remains.
    """
    return _scan(text, index, _SELECTION_MACHINE)


def scan_spelling_token(text: str, index: int) -> Token | None:
    """Scan one coarse token starting at ``index`` (see :func:`scan_selection_token`)."""
    return _scan(text, index, _SPELLING_MACHINE)


def break_text(text: str, spelling: bool = False) -> list[int]:
    """Return the token start offsets of a text window.

    The window may begin in the middle of a token, so the first token is
    never reported; callers that know the window starts at offset 0 add that
    boundary themselves.

    Args:
        text: Window of text to break
        spelling: Use the coarse automaton instead of the word-selection one

    Returns:
        Sorted offsets (relative to ``text``) at which a later token starts
    """
    scan = scan_spelling_token if spelling else scan_selection_token
    token = scan(text, 0)
    if token is None:
        return []
    breaks: list[int] = []
    position = token.end
    while position < len(text):
        token = scan(text, position)
        if token is None:
            break
        breaks.append(token.start)
        position = token.end
    return breaks


def spelling_segments(text: str) -> list[Token]:
    """Split text into alternating spellable and breaking segments.

    Example:
        >>> [(t.start, t.end, t.spellable) for t in spelling_segments("ab cd\\nef")]
        [(0, 5, True), (5, 6, False), (6, 8, True)]
    """
    segments: list[Token] = []
    position = 0
    while position < len(text):
        token = scan_spelling_token(text, position)
        if token is None:
            break
        segments.append(token)
        position = token.end
    return segments


# =============================================================================
# Heuristic boundary predicates
# =============================================================================


def _is_alnum(ch: str) -> bool:
    return ch.isalnum()


def _is_punctuation(ch: str) -> bool:
    return unicodedata.category(ch).startswith("P")


def at_paragraph_boundary(text: str, index: int) -> bool:
    """True at either end of the text or just after a line feed.

    A run of consecutive line feeds has its boundary after the last one.
    """
    if index <= 0 or index >= len(text):
        return True
    return text[index - 1] == "\n" and text[index] != "\n"


def at_word_boundary(text: str, index: int) -> bool:
    """Heuristic word boundary test tuned for English prose.

    Boundaries include trailing whitespace in the preceding word, and an
    apostrophe between two letters or digits does not split a word. The
    apostrophe check looks back at most two characters.
    """
    if index <= 0 or index >= len(text):
        return True

    if at_paragraph_boundary(text, index):
        return True

    ch1 = text[index - 1]
    ch2 = text[index]

    if (_is_alnum(ch1) and ch2 in APOSTROPHES) or (
        ch1 in APOSTROPHES and _is_alnum(ch2) and index >= 2 and _is_alnum(text[index - 2])
    ):
        return False

    return (
        (ch1.isspace() and not ch2.isspace())
        or (_is_alnum(ch1) and not _is_alnum(ch2))
        or (not _is_alnum(ch1) and _is_alnum(ch2))
        or (_is_punctuation(ch1) and ch2.isspace())
    )
