"""
Writing Assessment Models
=========================
Data classes exchanged between the engine components.

Character spans are half-open ``[start, end)`` offsets into the original
submission string.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Tuple

TASK_CATEGORIES = ('letter', 'email', 'memo', 'report')


@dataclass(frozen=True)
class TaskPoint:
    """A required content point of a writing task."""
    id: str
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'text': self.text}


@dataclass(frozen=True)
class WritingTask:
    """
    Immutable prompt specification.

    Attributes:
        id: Stable task identifier (e.g., "t1_letter_apology")
        label: Human readable title
        category: One of 'letter', 'email', 'memo', 'report'
        instruction: Prompt text shown to the writer
        min_words: Minimum word count required
        points: Required content points, in order
        hints: Optional phrasing hints shown alongside the prompt
    """
    id: str
    label: str
    category: str
    instruction: str
    min_words: int
    points: Tuple[TaskPoint, ...] = ()
    hints: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'label': self.label,
            'category': self.category,
            'instruction': self.instruction,
            'min_words': self.min_words,
            'points': [p.to_dict() for p in self.points],
            'hints': list(self.hints),
        }


@dataclass
class Submission:
    """Raw text submitted against one task."""
    text: str
    task: WritingTask


@dataclass(frozen=True)
class TextMetrics:
    """Measurements of a submission."""
    words: int = 0
    paragraphs: int = 0
    linking_words: int = 0
    contractions: int = 0
    type_token_ratio: float = 0.0
    formality_cues: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'words': self.words,
            'paragraphs': self.paragraphs,
            'linking_words': self.linking_words,
            'contractions': self.contractions,
            'type_token_ratio': round(self.type_token_ratio, 4),
            'formality_cues': self.formality_cues,
        }


@dataclass(frozen=True)
class PointCoverage:
    """Coverage verdict for a single task point."""
    id: str
    text: str
    covered: bool

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'text': self.text, 'covered': self.covered}


@dataclass(frozen=True)
class CategoryScores:
    """Rubric category scores, each 0-10."""
    language: int = 0
    form: int = 0
    organisation: int = 0
    effect: int = 0

    @property
    def total(self) -> int:
        return self.language + self.form + self.organisation + self.effect

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.language, self.form, self.organisation, self.effect)

    def to_dict(self) -> Dict[str, int]:
        return {
            'language': self.language,
            'form': self.form,
            'organisation': self.organisation,
            'effect': self.effect,
        }


@dataclass
class ScoreReport:
    """Output of the rubric scorer."""
    scores: CategoryScores
    total: int
    coverage: List[PointCoverage]
    advice: List[str]
    facts: TextMetrics
    cap: int = 10

    @property
    def all_points_covered(self) -> bool:
        return all(c.covered for c in self.coverage)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'scores': self.scores.to_dict(),
            'total': self.total,
            'coverage': [c.to_dict() for c in self.coverage],
            'advice': list(self.advice),
            'facts': self.facts.to_dict(),
            'cap': self.cap,
        }


@dataclass(frozen=True)
class HighlightToken:
    """A span of the submission marked for visual error indication."""
    start: int
    end: int
    word: str = ""
    suggestion: Optional[str] = None
    source: str = ""  # 'spelling', 'unknown', 'proof'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start': self.start,
            'end': self.end,
            'word': self.word,
            'suggestion': self.suggestion,
            'source': self.source,
        }


@dataclass
class LexicalIssue:
    """An aggregated local spelling finding."""
    word: str
    suggestion: Optional[str]
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'word': self.word, 'suggestion': self.suggestion, 'count': self.count}


@dataclass
class LexicalReport:
    """Result of a lexical check: issues by frequency plus highlight tokens."""
    issues: List[LexicalIssue] = field(default_factory=list)
    total: int = 0
    tokens: List[HighlightToken] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'issues': [i.to_dict() for i in self.issues],
            'total': self.total,
            'tokens': [t.to_dict() for t in self.tokens],
        }


@dataclass
class GrammarIssue:
    """An aggregated heuristic grammar finding."""
    type: str
    message: str
    example: Optional[str] = None
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'message': self.message,
            'example': self.example,
            'count': self.count,
        }


@dataclass
class GrammarReport:
    issues: List[GrammarIssue] = field(default_factory=list)
    total: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'issues': [i.to_dict() for i in self.issues], 'total': self.total}


PROOF_ISSUE_TYPES = ('spelling', 'grammar', 'style', 'other')


@dataclass
class ProofIssue:
    """A finding reported by the remote proofing service."""
    type: str  # 'spelling', 'grammar', 'style', 'other'
    message: str
    start: int
    end: int
    suggestion: Optional[str] = None
    example: Optional[str] = None
    rule_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'message': self.message,
            'start': self.start,
            'end': self.end,
            'suggestion': self.suggestion,
            'example': self.example,
            'rule_id': self.rule_id,
        }


@dataclass(frozen=True)
class ProofCounts:
    spelling: int = 0
    grammar: int = 0
    style: int = 0
    other: int = 0

    @property
    def total(self) -> int:
        return self.spelling + self.grammar + self.style + self.other

    def to_dict(self) -> Dict[str, int]:
        return {
            'spelling': self.spelling,
            'grammar': self.grammar,
            'style': self.style,
            'other': self.other,
            'total': self.total,
        }


@dataclass
class ProofResult:
    """
    Normalized proofing outcome.

    ``degraded`` is set when the service could not be used; the result is
    then empty and ``error`` holds the reason.
    """
    issues: List[ProofIssue] = field(default_factory=list)
    tokens_for_highlight: List[HighlightToken] = field(default_factory=list)
    counts: ProofCounts = field(default_factory=ProofCounts)
    degraded: bool = False
    error: Optional[str] = None

    @classmethod
    def empty(cls, error: Optional[str] = None) -> 'ProofResult':
        return cls(degraded=error is not None, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'issues': [i.to_dict() for i in self.issues],
            'tokens_for_highlight': [t.to_dict() for t in self.tokens_for_highlight],
            'counts': self.counts.to_dict(),
            'degraded': self.degraded,
            'error': self.error,
        }


@dataclass
class EvalResult:
    """Final assessment report for one submission."""
    scores: CategoryScores
    total: int
    coverage: List[PointCoverage]
    advice: List[str]
    facts: TextMetrics
    spelling: LexicalReport = field(default_factory=LexicalReport)
    unknown_words: LexicalReport = field(default_factory=LexicalReport)
    grammar: Optional[GrammarReport] = None
    proof: ProofResult = field(default_factory=ProofResult)
    highlights: List[HighlightToken] = field(default_factory=list)
    cap: int = 10

    def to_dict(self) -> Dict[str, Any]:
        return {
            'scores': self.scores.to_dict(),
            'total': self.total,
            'coverage': [c.to_dict() for c in self.coverage],
            'advice': list(self.advice),
            'facts': self.facts.to_dict(),
            'cap': self.cap,
            'spelling': self.spelling.to_dict(),
            'unknown_words': self.unknown_words.to_dict(),
            'grammar': self.grammar.to_dict() if self.grammar else None,
            'proof': self.proof.to_dict(),
            'highlights': [h.to_dict() for h in self.highlights],
        }
