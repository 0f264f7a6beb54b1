"""
Tests for the Rubric Scorer
===========================
Category scores, length caps and advice ordering.
"""

import pytest

from writing_assessment.models import PointCoverage, TextMetrics, WritingTask
from writing_assessment.scoring import (
    build_advice,
    length_cap,
    round_half_up,
    score_effect,
    score_form,
    score_language,
    score_metrics,
    score_organisation,
    score_submission,
)


def _task(category='letter', min_words=120) -> WritingTask:
    return WritingTask(id='t', label='T', category=category, instruction='',
                       min_words=min_words)


def _covered(*flags):
    return [PointCoverage(id=f"p{i}", text=f"Point {i}", covered=flag)
            for i, flag in enumerate(flags, 1)]


@pytest.fixture
def rich_facts() -> TextMetrics:
    return TextMetrics(words=150, paragraphs=3, linking_words=4, contractions=0,
                       type_token_ratio=0.7, formality_cues=3)


class TestRounding:
    """Tests for half-up rounding and length caps."""

    @pytest.mark.parametrize("value,expected", [
        (2.5, 3), (12.5, 13), (60.0, 60), (83.9999, 84), (0.4, 0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    @pytest.mark.parametrize("words,expected", [
        (59, 2), (60, 4), (83, 4), (84, 10), (500, 10),
    ])
    def test_length_cap_120(self, words, expected):
        assert length_cap(words, 120) == expected

    def test_length_cap_odd_minimum(self):
        # 25 * 0.5 = 12.5 -> 13, 25 * 0.7 = 17.5 -> 18
        assert length_cap(12, 25) == 2
        assert length_cap(13, 25) == 4
        assert length_cap(18, 25) == 10


class TestCategoryScores:
    """Tests for the four rubric categories."""

    def test_language_reaches_ten(self, rich_facts):
        assert score_language(rich_facts) == 10

    def test_language_contraction_penalty(self):
        facts = TextMetrics(words=100, type_token_ratio=0.5, contractions=2)
        assert score_language(facts) == 3

    def test_language_single_contraction_neutral(self):
        facts = TextMetrics(words=100, type_token_ratio=0.5, contractions=1)
        assert score_language(facts) == 4

    def test_language_never_negative(self):
        assert score_language(TextMetrics(words=10, contractions=5)) == 0

    def test_form(self, rich_facts):
        assert score_form(rich_facts, 120) == 9

    def test_organisation_covered(self, rich_facts):
        assert score_organisation(rich_facts, True) == 8

    def test_organisation_uncovered(self, rich_facts):
        assert score_organisation(rich_facts, False) == 5

    def test_effect(self, rich_facts):
        assert score_effect(rich_facts, 120, True) == 6
        assert score_effect(rich_facts, 120, False) == 5


class TestScoreMetrics:
    """Tests for the full scorer."""

    def test_too_short_scores_zero(self):
        report = score_metrics(TextMetrics(words=4, paragraphs=1), _task(), _covered(True))
        assert report.scores.as_tuple() == (0, 0, 0, 0)
        assert report.total == 0
        assert report.cap == 0
        assert report.advice == ["Write something to get feedback.",
                                 "The target is 120 words."]

    def test_total_is_sum(self, rich_facts):
        report = score_metrics(rich_facts, _task(), _covered(True, True))
        assert report.scores.as_tuple() == (10, 9, 8, 6)
        assert report.total == 33
        assert report.cap == 10

    def test_severe_length_cap(self):
        facts = TextMetrics(words=59, paragraphs=3, linking_words=4,
                            type_token_ratio=0.8, formality_cues=3)
        report = score_metrics(facts, _task(), _covered(True))
        assert report.cap == 2
        assert max(report.scores.as_tuple()) <= 2
        assert report.advice[0] == ("Write at least 120 words (currently 59). "
                                    "Texts this short are capped at 2/10 per category.")

    def test_short_length_cap(self):
        facts = TextMetrics(words=70, paragraphs=3, linking_words=4,
                            type_token_ratio=0.8, formality_cues=3)
        report = score_metrics(facts, _task(), _covered(True))
        assert report.cap == 4
        assert max(report.scores.as_tuple()) <= 4

    def test_uncovered_caps_organisation_and_effect(self, rich_facts):
        report = score_metrics(rich_facts, _task(), _covered(True, False))
        assert report.scores.organisation <= 7
        assert report.scores.effect <= 7
        assert not report.all_points_covered

    def test_to_dict(self, rich_facts):
        data = score_metrics(rich_facts, _task(), _covered(True)).to_dict()
        assert data['scores'] == {'language': 10, 'form': 9, 'organisation': 8, 'effect': 6}
        assert data['total'] == 33


class TestAdvice:
    """Tests for advice priority order."""

    def test_order(self):
        facts = TextMetrics(words=130, paragraphs=1, linking_words=0,
                            contractions=1, type_token_ratio=0.6)
        advice = build_advice(facts, _task('letter'), _covered(True, False))
        assert advice == [
            "Cover all task points; missing: Point 2.",
            "Use more linking words (Firstly, However, Therefore, For example...).",
            "Avoid contractions (don't, won't...) to keep a formal style.",
            "Divide the text into at least three paragraphs with clear topic sentences.",
            "Use a formal opening and closing (e.g., 'Dear Sir or Madam,' ... 'Yours faithfully,').",
        ]

    def test_length_first_without_cap_note(self):
        facts = TextMetrics(words=100, paragraphs=3, linking_words=3)
        advice = build_advice(facts, _task('memo'), _covered(True))
        assert advice == ["Write at least 120 words (currently 100)."]

    def test_report_tip(self, rich_facts):
        advice = build_advice(rich_facts, _task('report', 200), _covered(True))
        assert advice[-1].startswith("Use headings to structure the report")

    def test_memo_has_no_category_tip(self, rich_facts):
        assert build_advice(rich_facts, _task('memo'), _covered(True)) == []


class TestScoreSubmission:
    """Tests for scoring raw text."""

    def test_empty_text(self, letter_task):
        report = score_submission("", letter_task)
        assert report.total == 0
        assert [c.covered for c in report.coverage] == [False, False, False]

    def test_covering_letter(self, letter_task, covering_letter):
        report = score_submission(covering_letter, letter_task)
        assert report.all_points_covered
        assert report.cap == 10
        assert report.total == report.scores.total
        assert 0 < report.total <= 40

    def test_deterministic(self, letter_task, covering_letter):
        first = score_submission(covering_letter, letter_task).to_dict()
        second = score_submission(covering_letter, letter_task).to_dict()
        assert first == second

    def test_language_ten_from_text(self, letter_task):
        text = ("Firstly, our committee reviewed every proposal carefully. "
                "However, several budgets seemed unrealistic. "
                "Moreover, deadlines conflicted with holidays. "
                "Therefore, we recommend postponing final approval until March.")
        report = score_submission(text, letter_task)
        assert report.facts.words == 25
        assert report.facts.linking_words == 4
        assert report.facts.contractions == 0
        assert report.facts.type_token_ratio >= 0.65
        assert report.scores.language == 10
