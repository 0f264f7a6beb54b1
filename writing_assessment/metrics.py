"""
Text Metrics
============
Tokenizes and measures a submission: word and paragraph counts, vocabulary
richness (type-token ratio), linking phrases, contractions and formality
cues. Every function accepts any string and never raises.
"""

import re
from typing import List

from .lexicon import DEFAULT_LEXICON, Lexicon, WORD_RE
from .models import TextMetrics

__version__ = "1.2.0"

_LINE_SPLIT_RE = re.compile(r'\r?\n')


def _normalize_apostrophes(text: str) -> str:
    return text.replace('’', "'")


def tokenize(text: str) -> List[str]:
    """Word tokens in document order (contractions stay single tokens)."""
    return WORD_RE.findall(text or "")


def word_count(text: str) -> int:
    return len(tokenize(text))


def paragraph_count(text: str) -> int:
    """
    Count blocks of consecutive non-blank lines.

    A blank line terminates the current block. Text with any non-whitespace
    content has at least one paragraph; empty text has none.
    """
    if not text or not text.strip():
        return 0

    blocks = 0
    in_block = False
    for line in _LINE_SPLIT_RE.split(text):
        if line.strip():
            if not in_block:
                blocks += 1
                in_block = True
        else:
            in_block = False
    return max(blocks, 1)


def count_linking_words(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> int:
    """Number of distinct linking phrases present at least once."""
    padded = " " + (text or "").lower() + " "
    found = 0
    for phrase in lexicon.linking_words:
        if " " in phrase:
            if " " + phrase + " " in padded:
                found += 1
        elif re.search(r'\b' + re.escape(phrase) + r'\b', padded):
            found += 1
    return found


def count_contractions(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> int:
    """Total case-insensitive occurrences of the fixed contraction list."""
    if not text:
        return 0
    pattern = r'\b(?:' + '|'.join(re.escape(c.lower()) for c in lexicon.contractions) + r')\b'
    return len(re.findall(pattern, _normalize_apostrophes(text).lower()))


def type_token_ratio(text: str) -> float:
    """Distinct lower-cased tokens divided by total tokens; 0 without tokens."""
    tokens = [t.lower() for t in tokenize(_normalize_apostrophes(text or ""))]
    if not tokens:
        return 0.0
    return len(set(tokens)) / len(tokens)


def count_formality_cues(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> int:
    """Number of distinct formality cues present (substring match)."""
    lower = (text or "").lower()
    return sum(1 for cue in lexicon.formality_cues if cue in lower)


def compute_metrics(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> TextMetrics:
    """Measure a submission."""
    text = text or ""
    return TextMetrics(
        words=word_count(text),
        paragraphs=paragraph_count(text),
        linking_words=count_linking_words(text, lexicon),
        contractions=count_contractions(text, lexicon),
        type_token_ratio=type_token_ratio(text),
        formality_cues=count_formality_cues(text, lexicon),
    )
