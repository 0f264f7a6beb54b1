"""
Result Aggregator
=================
Merges local and remote findings into one report.

Highlight spans from the lexical checker (misspellings, unknown words) and
the proofing service (spelling and grammar issues only) are merged into a
single non-overlapping set, sorted by start offset. When two spans overlap,
the one that starts first is kept and the later one is dropped whole.
"""

from typing import AbstractSet, Iterable, List, Optional

from .config_logging import get_logger
from .grammar import check_grammar
from .lexicon import DEFAULT_LEXICON, Lexicon
from .models import (
    EvalResult, GrammarReport, HighlightToken, LexicalReport, ProofResult,
    ScoreReport, Submission, WritingTask
)
from .scoring import score_submission
from .spelling import check_spelling, check_unknown_words

__version__ = "1.2.0"

logger = get_logger('writing_assessment.aggregator')


def merge_highlights(spans: Iterable[HighlightToken]) -> List[HighlightToken]:
    """
    Sort spans by start and drop any span starting before the end of the
    previously accepted one. Equal starts keep input order.
    """
    accepted: List[HighlightToken] = []
    last_end = None
    for span in sorted(spans, key=lambda s: s.start):
        if last_end is not None and span.start < last_end:
            continue
        accepted.append(span)
        last_end = span.end
    return accepted


def assemble_result(
    score: ScoreReport,
    spelling: Optional[LexicalReport] = None,
    unknown_words: Optional[LexicalReport] = None,
    grammar: Optional[GrammarReport] = None,
    proof: Optional[ProofResult] = None
) -> EvalResult:
    """Combine scorer output with checker outputs into the final report."""
    spelling = spelling or LexicalReport()
    unknown_words = unknown_words or LexicalReport()
    proof = proof or ProofResult()

    raw_spans = list(spelling.tokens) + list(unknown_words.tokens) + list(proof.tokens_for_highlight)

    return EvalResult(
        scores=score.scores,
        total=score.total,
        coverage=list(score.coverage),
        advice=list(score.advice),
        facts=score.facts,
        spelling=spelling,
        unknown_words=unknown_words,
        grammar=grammar,
        proof=proof,
        highlights=merge_highlights(raw_spans),
        cap=score.cap,
    )


def evaluate_submission(
    text: str,
    task: WritingTask,
    dictionary: Optional[AbstractSet[str]] = None,
    proof: Optional[ProofResult] = None,
    include_grammar: bool = True,
    lexicon: Lexicon = DEFAULT_LEXICON
) -> EvalResult:
    """
    Score a submission and run the local checkers.

    ``proof`` is a result already obtained from the proofing adapter (it is
    the only part that needs the network, so callers fetch it separately).
    Grammar heuristics run when ``include_grammar`` is set, e.g. in offline
    mode.
    """
    text = text or ""
    with logger.log_operation('evaluate_submission', task_id=task.id):
        score = score_submission(text, task, lexicon)
        spelling = check_spelling(text, lexicon)
        unknown = check_unknown_words(text, dictionary, lexicon)
        grammar = check_grammar(text, lexicon) if include_grammar else None
        return assemble_result(score, spelling, unknown, grammar, proof)


def evaluate(submission: Submission, **kwargs) -> EvalResult:
    """Evaluate a Submission record; see ``evaluate_submission``."""
    return evaluate_submission(submission.text, submission.task, **kwargs)
