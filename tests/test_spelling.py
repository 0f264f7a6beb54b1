"""
Tests for the Local Lexical Checker
===================================
Known misspellings, unknown-word look-ups and word list loading.
"""

import pytest

from writing_assessment.lexicon import DEFAULT_LEXICON, Lexicon, load_word_list
from writing_assessment.spelling import (
    UNKNOWN_WORD_SUGGESTION,
    LexicalChecker,
    check_spelling,
    check_unknown_words,
)


@pytest.fixture
def dictionary():
    return frozenset({"the", "cat", "sat", "don't", "report"})


class TestCheckSpelling:
    """Tests for the misspelling map."""

    def test_counts_and_order(self):
        report = check_spelling("I recieve the mesage. I recieve it.")
        assert [(i.word, i.suggestion, i.count) for i in report.issues] == [
            ("recieve", "receive", 2),
            ("mesage", "message", 1),
        ]
        assert report.total == 3

    def test_tokens_in_document_order(self):
        report = check_spelling("I recieve the mesage. I recieve it.")
        assert [(t.start, t.end) for t in report.tokens] == [(2, 9), (14, 20), (24, 31)]
        assert all(t.source == 'spelling' for t in report.tokens)

    def test_case_insensitive_keeps_surface_form(self):
        report = check_spelling("Recieve")
        assert report.issues[0].word == "recieve"
        assert report.tokens[0].word == "Recieve"
        assert report.tokens[0].suggestion == "receive"

    def test_ties_keep_first_occurrence(self):
        report = check_spelling("teh thier")
        assert [i.word for i in report.issues] == ["teh", "thier"]

    def test_clean_text(self):
        report = check_spelling("Everything here is spelled correctly.")
        assert report.issues == []
        assert report.total == 0
        assert report.tokens == []

    def test_custom_misspellings(self):
        lexicon = Lexicon.build(misspellings={"Colour": "color"})
        report = check_spelling("The colour is red.", lexicon)
        assert report.issues[0].suggestion == "color"


class TestCheckUnknownWords:
    """Tests for dictionary look-ups."""

    def test_no_dictionary_checks_nothing(self):
        report = check_unknown_words("Xyzzy plugh", None)
        assert report.issues == []
        assert report.total == 0

    def test_unknown_words(self, dictionary):
        report = check_unknown_words("The cat sat on xyzzy mat", dictionary)
        assert [i.word for i in report.issues] == ["xyzzy", "mat"]
        assert all(i.suggestion == UNKNOWN_WORD_SUGGESTION for i in report.issues)
        assert all(t.source == 'unknown' for t in report.tokens)

    def test_skips_short_ignored_and_misspelled(self, dictionary):
        report = check_unknown_words("NATO on recieve", dictionary)
        assert report.issues == []

    def test_curly_apostrophe(self, dictionary):
        report = check_unknown_words("Don’t report", dictionary)
        assert report.issues == []

    def test_frequency_order(self, dictionary):
        report = check_unknown_words("foo bar bar", dictionary)
        assert [(i.word, i.count) for i in report.issues] == [("bar", 2), ("foo", 1)]
        assert [t.word for t in report.tokens] == ["foo", "bar", "bar"]


class TestLexicalChecker:
    """Tests for the bound checker."""

    def test_has_dictionary(self, dictionary):
        assert LexicalChecker(dictionary).has_dictionary
        assert not LexicalChecker().has_dictionary

    def test_checks(self, dictionary):
        checker = LexicalChecker(dictionary, DEFAULT_LEXICON)
        assert checker.check_spelling("teh cat").total == 1
        assert checker.check_unknown_words("the dog").total == 1


class TestLoadWordList:
    """Tests for dictionary file loading."""

    def test_load(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("# comment\nApple\n\nbanana  \n", encoding='utf-8')
        assert load_word_list(path) == frozenset({"apple", "banana"})

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_word_list(tmp_path / "missing.txt")
