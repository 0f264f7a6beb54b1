"""
Tests for the Result Aggregator
===============================
Highlight merging and end-to-end evaluation.
"""

import json

from writing_assessment.aggregator import (
    assemble_result,
    evaluate,
    evaluate_submission,
    merge_highlights,
)
from writing_assessment.models import HighlightToken, ProofResult, Submission
from writing_assessment.proofing import normalize_matches


def _span(start, end, source='spelling'):
    return HighlightToken(start=start, end=end, source=source)


class TestMergeHighlights:
    """Tests for the non-overlapping merge."""

    def test_overlap_keeps_earlier(self):
        merged = merge_highlights([_span(0, 5), _span(3, 8)])
        assert [(s.start, s.end) for s in merged] == [(0, 5)]

    def test_sorted_by_start(self):
        merged = merge_highlights([_span(10, 12), _span(3, 8), _span(0, 2)])
        assert [(s.start, s.end) for s in merged] == [(0, 2), (3, 8), (10, 12)]

    def test_adjacent_spans_kept(self):
        merged = merge_highlights([_span(0, 5), _span(5, 8)])
        assert len(merged) == 2

    def test_equal_starts_keep_input_order(self):
        merged = merge_highlights([_span(2, 4, 'spelling'), _span(2, 6, 'proof')])
        assert [s.source for s in merged] == ['spelling']

    def test_contained_span_dropped(self):
        merged = merge_highlights([_span(0, 10), _span(2, 4), _span(12, 14)])
        assert [(s.start, s.end) for s in merged] == [(0, 10), (12, 14)]

    def test_empty(self):
        assert merge_highlights([]) == []


class TestEvaluateSubmission:
    """Tests for the full evaluation."""

    def test_spelling_wins_over_overlapping_proof_span(self, letter_task):
        text = "I recieve it."
        proof = ProofResult(tokens_for_highlight=[
            _span(2, 9, 'proof'),
            _span(4, 12, 'proof'),
        ])
        result = evaluate_submission(text, letter_task, proof=proof)
        assert [(h.start, h.end, h.source) for h in result.highlights] == [(2, 9, 'spelling')]

    def test_proof_highlights_merged(self, letter_task):
        text = "This are a tset. I recieve it."
        matches = [
            {"offset": 5, "length": 3, "rule": {"issueType": "grammar"}},
            {"offset": 11, "length": 4, "rule": {"issueType": "misspelling"}},
            {"offset": 0, "length": 4, "rule": {"issueType": "style"}},
        ]
        proof = normalize_matches(matches, text)
        result = evaluate_submission(text, letter_task, proof=proof)
        assert [(h.start, h.end) for h in result.highlights] == [(5, 8), (11, 15), (19, 26)]
        assert result.proof.counts.style == 1

    def test_unknown_words_highlighted(self, letter_task):
        result = evaluate_submission("The cat sat on the xyzzy.", letter_task,
                                     dictionary={"the", "cat", "sat"})
        assert [h.word for h in result.highlights] == ["xyzzy"]
        assert result.unknown_words.total == 1

    def test_grammar_optional(self, letter_task):
        assert evaluate_submission("i went home", letter_task).grammar is not None
        assert evaluate_submission("i went home", letter_task, include_grammar=False).grammar is None

    def test_without_proof(self, letter_task, covering_letter):
        result = evaluate_submission(covering_letter, letter_task)
        assert result.proof.issues == []
        assert not result.proof.degraded
        assert result.total == result.scores.total

    def test_degraded_proof_still_scores(self, letter_task, covering_letter):
        result = evaluate_submission(covering_letter, letter_task,
                                     proof=ProofResult.empty(error="unreachable"))
        assert result.proof.degraded
        assert result.total > 0

    def test_deterministic(self, letter_task, covering_letter):
        first = evaluate_submission(covering_letter, letter_task).to_dict()
        second = evaluate_submission(covering_letter, letter_task).to_dict()
        assert first == second

    def test_json_serializable(self, letter_task, covering_letter):
        data = evaluate_submission(covering_letter, letter_task).to_dict()
        decoded = json.loads(json.dumps(data))
        assert set(decoded) >= {'scores', 'total', 'coverage', 'advice', 'facts',
                                'spelling', 'unknown_words', 'grammar', 'proof', 'highlights'}

    def test_evaluate_record(self, letter_task):
        result = evaluate(Submission(text="Hello", task=letter_task), include_grammar=False)
        assert result.total == 0
        assert result.advice[0] == "Write something to get feedback."


class TestAssembleResult:
    """Tests for assembling from precomputed parts."""

    def test_defaults(self, letter_task):
        from writing_assessment.scoring import score_submission

        score = score_submission("", letter_task)
        result = assemble_result(score)
        assert result.highlights == []
        assert result.grammar is None
        assert result.spelling.total == 0
