"""
Coverage Detector
=================
Decides, per required task point, whether a submission addresses it by
key-term overlap.
"""

import re
from typing import List, Sequence

from .lexicon import DEFAULT_LEXICON, Lexicon
from .models import PointCoverage, TaskPoint

__version__ = "1.2.0"

# Anything that is not a letter
_NON_LETTER_RE = re.compile(r'[\W\d_]+')


def key_terms(point_text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> List[str]:
    """Distinct lower-cased non-stop-words of a task point, in order."""
    terms = []
    for word in _NON_LETTER_RE.split((point_text or "").lower()):
        if word and word not in lexicon.stop_words and word not in terms:
            terms.append(word)
    return terms


def is_point_covered(text_lower: str, point_text: str,
                     lexicon: Lexicon = DEFAULT_LEXICON) -> bool:
    """
    Apply the overlap rule to one point.

    3+ key terms need 2 hits, 1-2 key terms need 1 hit, no key terms is
    never covered.
    """
    terms = key_terms(point_text, lexicon)
    if not terms:
        return False
    hits = sum(1 for term in terms if term in text_lower)
    if len(terms) >= 3:
        return hits >= 2
    return hits >= 1


def detect_coverage(text: str, points: Sequence[TaskPoint],
                    lexicon: Lexicon = DEFAULT_LEXICON) -> List[PointCoverage]:
    """Coverage verdicts parallel to ``points`` (same length and order)."""
    lower = (text or "").lower()
    return [
        PointCoverage(id=p.id, text=p.text, covered=is_point_covered(lower, p.text, lexicon))
        for p in points
    ]
