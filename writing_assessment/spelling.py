"""
Local Lexical Checker
=====================
Offline spelling checks without external services:

- known misspellings from a static typo -> correction map
- unknown words against an externally supplied word list (optional)

Both checks report issues ordered by frequency plus highlight tokens in
document order.
"""

from collections import OrderedDict
from typing import AbstractSet, Iterator, Optional, Tuple

from .lexicon import DEFAULT_LEXICON, Lexicon, WORD_RE
from .models import HighlightToken, LexicalIssue, LexicalReport

__version__ = "1.2.0"

UNKNOWN_WORD_SUGGESTION = "check spelling"
MIN_UNKNOWN_WORD_LENGTH = 3


def _iter_tokens(text: str) -> Iterator[Tuple[str, int, int]]:
    for match in WORD_RE.finditer(text):
        yield match.group(), match.start(), match.end()


def _build_report(found: "OrderedDict[str, LexicalIssue]", tokens) -> LexicalReport:
    # sorted() is stable: ties keep first-occurrence order
    issues = sorted(found.values(), key=lambda issue: -issue.count)
    return LexicalReport(
        issues=issues,
        total=sum(issue.count for issue in issues),
        tokens=tokens,
    )


def check_spelling(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> LexicalReport:
    """Flag tokens found in the misspelling map."""
    text = text or ""
    found: "OrderedDict[str, LexicalIssue]" = OrderedDict()
    tokens = []

    for word, start, end in _iter_tokens(text):
        lower = word.lower()
        if lower in lexicon.ignore_words:
            continue
        correction = lexicon.misspellings.get(lower)
        if correction is None:
            continue

        issue = found.get(lower)
        if issue is None:
            issue = found[lower] = LexicalIssue(word=lower, suggestion=correction)
        issue.count += 1
        tokens.append(HighlightToken(
            start=start, end=end, word=word, suggestion=correction, source='spelling'
        ))

    return _build_report(found, tokens)


def check_unknown_words(
    text: str,
    dictionary: Optional[AbstractSet[str]] = None,
    lexicon: Lexicon = DEFAULT_LEXICON
) -> LexicalReport:
    """
    Flag tokens absent from ``dictionary`` (a set of lower-case words).

    Without a dictionary nothing is checked. Short tokens, ignored acronyms
    and known misspellings are skipped. A capitalized token at a sentence
    start is accepted when its lower-case form is in the dictionary.
    """
    if not dictionary:
        return LexicalReport()

    text = text or ""
    found: "OrderedDict[str, LexicalIssue]" = OrderedDict()
    tokens = []

    for word, start, end in _iter_tokens(text):
        lower = word.lower()
        if len(word) < MIN_UNKNOWN_WORD_LENGTH:
            continue
        if lower in lexicon.ignore_words or word.isdigit():
            continue
        if lower in lexicon.misspellings:
            continue

        # Dictionary entries are lower-case, so a sentence-initial capital
        # ("The") is accepted through its lower-case form.
        if lower in dictionary or lower.replace("’", "'") in dictionary:
            continue

        issue = found.get(lower)
        if issue is None:
            issue = found[lower] = LexicalIssue(word=lower, suggestion=UNKNOWN_WORD_SUGGESTION)
        issue.count += 1
        tokens.append(HighlightToken(
            start=start, end=end, word=word,
            suggestion=UNKNOWN_WORD_SUGGESTION, source='unknown'
        ))

    return _build_report(found, tokens)


class LexicalChecker:
    """Binds a lexicon and an optional dictionary for repeated checks."""

    CHECKER_NAME = "Spelling (Local)"
    CHECKER_VERSION = "1.2.0"

    def __init__(self, dictionary: Optional[AbstractSet[str]] = None,
                 lexicon: Lexicon = DEFAULT_LEXICON):
        self.dictionary = frozenset(dictionary) if dictionary else None
        self.lexicon = lexicon

    @property
    def has_dictionary(self) -> bool:
        return self.dictionary is not None

    def check_spelling(self, text: str) -> LexicalReport:
        return check_spelling(text, self.lexicon)

    def check_unknown_words(self, text: str) -> LexicalReport:
        return check_unknown_words(text, self.dictionary, self.lexicon)
