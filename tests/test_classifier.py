"""
Tests for lexical classification, the tokenizing automata and the heuristic
boundary predicates.
"""

import pytest

from python_textpattern.classifier import (
    LexClass,
    at_paragraph_boundary,
    at_word_boundary,
    break_text,
    get_lex_class,
    scan_selection_token,
    spelling_segments,
)


class TestLexClass:
    """Tests for get_lex_class."""

    @pytest.mark.parametrize(
        "ch, expected",
        [
            ("a", LexClass.ALNUM),
            ("Z", LexClass.ALNUM),
            ("7", LexClass.ALNUM),
            ("'", LexClass.APOSTROPHE),
            (".", LexClass.PUNCTUATION),
            ("\n", LexClass.LINE_FEED),
            ("\r", LexClass.CARRIAGE_RETURN),
            (" ", LexClass.SPACE),
            ("\t", LexClass.SPACE),
            ("\x01", LexClass.IGNORED),
        ],
    )
    def test_ascii_table(self, ch, expected):
        """ASCII characters come from the fixed table."""
        assert get_lex_class(ch) == expected

    def test_latin_extended_is_alnum(self):
        """Code points below U+2000 default to letters."""
        assert get_lex_class("é") == LexClass.ALNUM

    def test_general_punctuation_block(self):
        """U+2000..U+2FFF is punctuation."""
        assert get_lex_class("\u2014") == LexClass.PUNCTUATION

    def test_cjk_is_wide_script(self):
        assert get_lex_class("中") == LexClass.WIDE_SCRIPT

    def test_embedded_object_marker(self):
        assert get_lex_class("\uf8ff") == LexClass.EMBEDDED_OBJECT

    def test_fullwidth_band(self):
        """Full-width forms use their own small table."""
        assert get_lex_class("\uff01") == LexClass.PUNCTUATION
        assert get_lex_class("\uff07") == LexClass.APOSTROPHE
        assert get_lex_class("\uff21") == LexClass.ALNUM


class TestAutomata:
    """Tests for token scanning and break_text."""

    def test_word_keeps_inner_apostrophe_and_trailing_space(self):
        """A word token absorbs an inner apostrophe and the spaces after it."""
        token = scan_selection_token("don't stop", 0)
        assert (token.start, token.end) == (0, 6)

    def test_scan_skips_ignored_prefix(self):
        token = scan_selection_token("\x01\x01ab", 0)
        assert (token.start, token.end) == (2, 4)

    def test_scan_returns_none_without_classifiable_text(self):
        assert scan_selection_token("\x01\x02", 0) is None

    def test_break_text_skips_first_token(self):
        """Break offsets start at the second token."""
        assert break_text("hello world. Bye") == [6, 11, 13]

    def test_break_text_empty(self):
        assert break_text("") == []

    def test_line_feeds_are_separate_tokens(self):
        assert break_text("a\n\nb") == [1, 2, 3]

    def test_spelling_segments(self):
        """The coarse automaton splits western text from line breaks."""
        segments = [(t.start, t.end, t.spellable) for t in spelling_segments("ab cd\nef")]
        assert segments == [(0, 5, True), (5, 6, False), (6, 8, True)]

    def test_spelling_segments_wide_script(self):
        segments = [(t.start, t.end, t.spellable) for t in spelling_segments("ab中文")]
        assert segments == [(0, 2, True), (2, 4, False)]


class TestWordBoundary:
    """Tests for the heuristic word boundary predicate."""

    @pytest.mark.parametrize("text", ["", "a", "hello world", "  ", "it's", "\n\n", "x.y"])
    def test_ends_are_always_boundaries(self, text):
        assert at_word_boundary(text, 0)
        assert at_word_boundary(text, len(text))

    def test_letter_to_space_and_space_to_letter(self):
        text = "hello world"
        assert at_word_boundary(text, 5)
        assert at_word_boundary(text, 6)
        assert not at_word_boundary(text, 3)

    def test_apostrophe_between_letters_is_not_a_boundary(self):
        text = "don't"
        assert not at_word_boundary(text, 3)
        assert not at_word_boundary(text, 4)

    def test_typographic_apostrophe(self):
        text = "don\u2019t"
        assert not at_word_boundary(text, 3)
        assert not at_word_boundary(text, 4)

    def test_punctuation_to_space(self):
        text = "a, b"
        assert at_word_boundary(text, 1)
        assert at_word_boundary(text, 2)
        assert at_word_boundary(text, 3)

    def test_paragraph_boundary_is_word_boundary(self):
        assert at_word_boundary("ab\n\ncd", 4)


class TestParagraphBoundary:
    """Tests for the paragraph boundary predicate."""

    def test_after_line_feed(self):
        assert at_paragraph_boundary("ab\ncd", 3)
        assert not at_paragraph_boundary("ab\ncd", 2)

    def test_run_of_line_feeds(self):
        """Consecutive line feeds have their boundary after the last one."""
        text = "ab\n\ncd"
        assert not at_paragraph_boundary(text, 3)
        assert at_paragraph_boundary(text, 4)

    def test_ends(self):
        assert at_paragraph_boundary("abc", 0)
        assert at_paragraph_boundary("abc", 3)
