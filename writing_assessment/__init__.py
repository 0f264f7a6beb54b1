"""
Writing Assessment Engine
=========================
Scores formal English writing against a task specification (minimum word
count, required content points, task category) and reports actionable
feedback with inline error highlighting.

Components:
- metrics: word/paragraph counts, type-token ratio, linking words,
  contractions, formality cues
- coverage: key-term overlap per required task point
- scoring: rubric categories with length-based hard caps and advice
- spelling: static misspelling map and optional dictionary look-ups
- grammar: fixed-rule grammar and mechanics heuristics
- proofing: LanguageTool-compatible HTTP service with graceful degradation
- aggregator: merged, non-overlapping highlights and the final report
"""

from .config_logging import __version__

from .aggregator import assemble_result, evaluate, evaluate_submission, merge_highlights
from .coverage import detect_coverage
from .grammar import GrammarHeuristics, check_grammar
from .lexicon import DEFAULT_LEXICON, Lexicon, load_word_list
from .metrics import compute_metrics
from .models import (
    CategoryScores,
    EvalResult,
    HighlightToken,
    ProofResult,
    Submission,
    TaskPoint,
    TextMetrics,
    WritingTask,
)
from .scoring import score_metrics, score_submission
from .spelling import LexicalChecker, check_spelling, check_unknown_words
from .tasks import TaskCatalog, get_catalog

__all__ = [
    '__version__',
    'assemble_result',
    'evaluate',
    'evaluate_submission',
    'merge_highlights',
    'detect_coverage',
    'GrammarHeuristics',
    'check_grammar',
    'DEFAULT_LEXICON',
    'Lexicon',
    'load_word_list',
    'compute_metrics',
    'CategoryScores',
    'EvalResult',
    'HighlightToken',
    'ProofResult',
    'Submission',
    'TaskPoint',
    'TextMetrics',
    'WritingTask',
    'score_metrics',
    'score_submission',
    'LexicalChecker',
    'check_spelling',
    'check_unknown_words',
    'TaskCatalog',
    'get_catalog',
]
