"""
Rubric Scorer
=============
Combines text metrics and task-point coverage into four category scores
(language, form, organisation, effect; 0-10 each, 40 total) and an ordered
list of advice.

Length caps:
- fewer than 5 words: every category is 0
- below 50% of the minimum word count: each category capped at 2
- below 70% of the minimum word count: each category capped at 4
"""

import math
from typing import List, Optional, Sequence

from .coverage import detect_coverage
from .lexicon import DEFAULT_LEXICON, Lexicon
from .metrics import compute_metrics
from .models import (
    CategoryScores, PointCoverage, ScoreReport, TextMetrics, WritingTask
)

__version__ = "1.2.0"

MIN_SCORABLE_WORDS = 5
MAX_CATEGORY_SCORE = 10
UNCOVERED_CATEGORY_CAP = 7

LENGTH_CAP_SEVERE = 2
LENGTH_CAP_SHORT = 4

LINKING_ADVICE_THRESHOLD = 3
PARAGRAPH_ADVICE_THRESHOLD = 3


def round_half_up(value: float) -> int:
    """Round .5 away from zero for the positive thresholds used here."""
    return int(math.floor(value + 0.5))


def clamp(value: int, low: int = 0, high: int = MAX_CATEGORY_SCORE) -> int:
    return max(low, min(high, value))


def length_cap(words: int, min_words: int) -> int:
    """Maximum score any category may receive for a given length."""
    if words < round_half_up(min_words * 0.5):
        return LENGTH_CAP_SEVERE
    if words < round_half_up(min_words * 0.7):
        return LENGTH_CAP_SHORT
    return MAX_CATEGORY_SCORE


def score_language(facts: TextMetrics) -> int:
    score = 0
    ttr = facts.type_token_ratio
    if ttr >= 0.30:
        score += 2
    if ttr >= 0.50:
        score += 2
    # Worth 2 so rich, formal text with four linking words reaches language = 10
    if ttr >= 0.65:
        score += 2
    if facts.linking_words >= 2:
        score += 1
    if facts.linking_words >= 4:
        score += 1
    if facts.contractions == 0:
        score += 2
    elif facts.contractions >= 2:
        score -= 1
    return clamp(score)


def score_form(facts: TextMetrics, min_words: int) -> int:
    score = 0
    if facts.formality_cues >= 1:
        score += 2
    if facts.formality_cues >= 3:
        score += 1
    if facts.words >= min_words:
        score += 4
    if facts.words >= round_half_up(min_words * 1.2):
        score += 1
    if facts.contractions == 0:
        score += 1
    elif facts.contractions >= 3:
        score -= 1
    return clamp(score)


def score_organisation(facts: TextMetrics, all_covered: bool) -> int:
    score = 0
    if facts.paragraphs >= 2:
        score += 2
    if facts.paragraphs >= 3:
        score += 2
    if facts.linking_words >= 3:
        score += 1
    if all_covered:
        score += 3
    score = clamp(score)
    if not all_covered:
        score = min(score, UNCOVERED_CATEGORY_CAP)
    return score


def score_effect(facts: TextMetrics, min_words: int, all_covered: bool) -> int:
    score = 0
    if facts.formality_cues >= 2:
        score += 2
    if facts.paragraphs >= 3:
        score += 1
    if facts.words >= min_words:
        score += 3
    if not all_covered:
        score -= 1
    score = clamp(score)
    if not all_covered:
        score = min(score, UNCOVERED_CATEGORY_CAP)
    return score


def _category_tip(category: str) -> Optional[str]:
    if category in ('letter', 'email'):
        return ("Use a formal opening and closing "
                "(e.g., 'Dear Sir or Madam,' ... 'Yours faithfully,').")
    if category == 'report':
        return ("Use headings to structure the report "
                "(Introduction, Findings/Analysis, Conclusion/Recommendations).")
    return None


def build_advice(
    facts: TextMetrics,
    task: WritingTask,
    coverage: Sequence[PointCoverage],
    cap: int = MAX_CATEGORY_SCORE
) -> List[str]:
    """
    Advice in fixed priority order: length, coverage, linking words,
    contractions, paragraphs, category-specific formatting.
    """
    advice: List[str] = []

    def add(message: Optional[str]):
        if message and message not in advice:
            advice.append(message)

    if facts.words < task.min_words:
        message = f"Write at least {task.min_words} words (currently {facts.words})."
        if cap < MAX_CATEGORY_SCORE:
            message += f" Texts this short are capped at {cap}/10 per category."
        add(message)

    missing = [c.text for c in coverage if not c.covered]
    if missing:
        add("Cover all task points; missing: " + "; ".join(missing) + ".")

    if facts.linking_words < LINKING_ADVICE_THRESHOLD:
        add("Use more linking words (Firstly, However, Therefore, For example...).")

    if facts.contractions > 0:
        add("Avoid contractions (don't, won't...) to keep a formal style.")

    if facts.paragraphs < PARAGRAPH_ADVICE_THRESHOLD:
        add("Divide the text into at least three paragraphs with clear topic sentences.")

    add(_category_tip(task.category))
    return advice


def score_metrics(
    facts: TextMetrics,
    task: WritingTask,
    coverage: Sequence[PointCoverage]
) -> ScoreReport:
    """Score precomputed metrics and coverage against a task."""
    coverage = list(coverage)

    if facts.words < MIN_SCORABLE_WORDS:
        advice = [
            "Write something to get feedback.",
            f"The target is {task.min_words} words.",
        ]
        return ScoreReport(
            scores=CategoryScores(),
            total=0,
            coverage=coverage,
            advice=advice,
            facts=facts,
            cap=0,
        )

    cap = length_cap(facts.words, task.min_words)
    all_covered = all(c.covered for c in coverage)

    scores = CategoryScores(
        language=min(score_language(facts), cap),
        form=min(score_form(facts, task.min_words), cap),
        organisation=min(score_organisation(facts, all_covered), cap),
        effect=min(score_effect(facts, task.min_words, all_covered), cap),
    )

    return ScoreReport(
        scores=scores,
        total=scores.total,
        coverage=coverage,
        advice=build_advice(facts, task, coverage, cap),
        facts=facts,
        cap=cap,
    )


def score_submission(text: str, task: WritingTask,
                     lexicon: Lexicon = DEFAULT_LEXICON) -> ScoreReport:
    """Measure, detect coverage and score a submission in one call."""
    facts = compute_metrics(text, lexicon)
    coverage = detect_coverage(text, task.points, lexicon)
    return score_metrics(facts, task, coverage)
