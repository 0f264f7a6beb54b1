"""
Grammar Heuristics
==================
Fixed-rule grammar and mechanics checks. No parsing is attempted; each rule
is a regular expression and findings are aggregated per rule with a count
and a first example.

The default rules are applied literally. ``lenient=True`` switches on a few
false-positive lists ("that that", "a university", "did he go", "10:30",
closing quotes after the full stop) for callers who prefer fewer flags.
"""

import re
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from .lexicon import DEFAULT_LEXICON, Lexicon
from .models import GrammarIssue, GrammarReport

__version__ = "1.2.0"


class GrammarHeuristics:
    """Detects common mechanical errors in learner writing."""

    CHECKER_NAME = "Grammar (Heuristic)"
    CHECKER_VERSION = "1.2.0"

    MESSAGES: Dict[str, str] = {
        'repeatedWord': "Repeated word",
        'lowercaseI': "Pronoun 'I' should be capitalized",
        'articleAAn': "Use 'a' before a consonant sound, 'an' before a vowel sound",
        'sentenceStartLower': "Sentence should start with a capital letter",
        'missingEndPunctuation': "Finish sentences with . ! or ?",
        'doubleSpace': "Use a single space between words",
        'spaceBeforePunct': "No space before punctuation",
        'noSpaceAfterPunct': "Add a space after punctuation",
        'sva3rd': "Use 3rd person singular: he/she/it + verb-s (e.g., 'he works')",
    }

    # False-positive lists, consulted in lenient mode only.
    # Words that can legitimately be repeated ("that that", "had had")
    ALLOWED_REPEATS = {'that', 'had'}

    # Vowel letter but consonant sound: "a university", "a one-off"
    A_EXCEPTIONS = {
        'one', 'once', 'unit', 'units', 'united', 'union', 'unique', 'uniform',
        'university', 'universal', 'user', 'users', 'usual', 'useful', 'use',
        'european', 'euro', 'eu', 'utility',
    }

    # Consonant letter but vowel sound: "an hour", "an honest"
    AN_EXCEPTIONS = {
        'hour', 'hours', 'hourly', 'honest', 'honestly', 'honour', 'honor',
        'honourable', 'honorable', 'heir',
    }

    # Words after which "he/she/it + base verb" is correct ("did he go", "let it work")
    SVA_ALLOWED_BEFORE = {
        'do', 'does', 'did', 'can', 'could', 'will', 'would', 'shall', 'should',
        'may', 'might', 'must', 'let', 'make', 'made', 'makes', 'help', 'helps',
        'helped', 'see', 'saw', 'watch', 'hear', 'heard', 'have', 'had',
    }

    REPEATED_RE = re.compile(r'\b([a-z]+)\s+\1\b')
    LOWERCASE_I_RE = re.compile(r'\bi\b')
    A_BEFORE_VOWEL_RE = re.compile(r'\ba\s+([aeiou][\w\'-]*)')
    AN_BEFORE_CONSONANT_RE = re.compile(r'\ban\s+([b-df-hj-np-tv-z][\w\'-]*)')
    SENTENCE_SPLIT_RE = re.compile(r'(?<=[.!?])\s+|[\r\n]+')
    END_PUNCT_RE = re.compile(r'[.!?]$')
    LENIENT_END_PUNCT_RE = re.compile(r'[.!?]["\'”’)\]]*$')
    DOUBLE_SPACE_RE = re.compile(r' {2,}')
    SPACE_BEFORE_PUNCT_RE = re.compile(r'\s[,.;:!?]')
    NO_SPACE_AFTER_RE = re.compile(r'[,:;](?!\s)')
    LENIENT_NO_SPACE_AFTER_RE = re.compile(r'[,:;](?=[^\s\d])')
    PRECEDING_WORD_RE = re.compile(r'([A-Za-z]+)\s+$')

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON, lenient: bool = False):
        self.lexicon = lexicon
        self.lenient = lenient
        verbs = '|'.join(re.escape(v) for v in lexicon.base_verbs)
        self._sva_re = re.compile(r'\b(he|she|it)\s+(' + verbs + r')\b', re.IGNORECASE)

    def check(self, text: str) -> GrammarReport:
        """Run every rule and aggregate the findings."""
        text = text or ""
        issues: "OrderedDict[Tuple[str, str], GrammarIssue]" = OrderedDict()

        def add(issue_type: str, count: int, example: Optional[str] = None):
            if count <= 0:
                return
            message = self.MESSAGES[issue_type]
            key = (issue_type, message)
            existing = issues.get(key)
            if existing:
                existing.count += count
                if existing.example is None:
                    existing.example = example
            else:
                issues[key] = GrammarIssue(
                    type=issue_type, message=message, example=example, count=count
                )

        lower = text.lower()
        for issue_type, count, example in (
            self._repeated_words(lower),
            self._lowercase_i(text),
            self._article_mismatch(lower),
        ):
            add(issue_type, count, example)

        sentences = self.split_sentences(text)
        add(*self._sentence_start_lower(sentences))
        add(*self._missing_end_punctuation(sentences))

        for issue_type, count, example in self._spacing(text):
            add(issue_type, count, example)

        add(*self._subject_verb_agreement(text))

        found = list(issues.values())
        return GrammarReport(issues=found, total=sum(i.count for i in found))

    @classmethod
    def split_sentences(cls, text: str) -> List[str]:
        """Sentences split on terminal punctuation + whitespace, or on line breaks."""
        return [s.strip() for s in cls.SENTENCE_SPLIT_RE.split(text) if s and s.strip()]

    def _repeated_words(self, lower: str):
        allowed = self.ALLOWED_REPEATS if self.lenient else ()
        matches = [m.group() for m in self.REPEATED_RE.finditer(lower) if m.group(1) not in allowed]
        return 'repeatedWord', len(matches), matches[0] if matches else None

    def _lowercase_i(self, text: str):
        count = len(self.LOWERCASE_I_RE.findall(text))
        return 'lowercaseI', count, 'i' if count else None

    def _article_mismatch(self, lower: str):
        examples = []
        for pattern, exceptions in ((self.A_BEFORE_VOWEL_RE, self.A_EXCEPTIONS),
                                    (self.AN_BEFORE_CONSONANT_RE, self.AN_EXCEPTIONS)):
            for match in pattern.finditer(lower):
                if self.lenient and match.group(1).split('-')[0] in exceptions:
                    continue
                examples.append((match.start(), match.group()))
        examples.sort()
        return 'articleAAn', len(examples), examples[0][1].strip() if examples else None

    def _sentence_start_lower(self, sentences: List[str]):
        bad = [s for s in sentences if 'a' <= s[0] <= 'z']
        return 'sentenceStartLower', len(bad), bad[0][:40] if bad else None

    def _missing_end_punctuation(self, sentences: List[str]):
        pattern = self.LENIENT_END_PUNCT_RE if self.lenient else self.END_PUNCT_RE
        bad = [s for s in sentences if not pattern.search(s)]
        return 'missingEndPunctuation', len(bad), bad[0][-40:] if bad else None

    def _spacing(self, text: str):
        doubles = self.DOUBLE_SPACE_RE.findall(text)
        yield 'doubleSpace', len(doubles), None

        before = list(self.SPACE_BEFORE_PUNCT_RE.finditer(text))
        example = text[max(0, before[0].start() - 10):before[0].end()] if before else None
        yield 'spaceBeforePunct', len(before), example

        pattern = self.LENIENT_NO_SPACE_AFTER_RE if self.lenient else self.NO_SPACE_AFTER_RE
        after = list(pattern.finditer(text))
        example = text[max(0, after[0].start() - 10):after[0].end() + 10] if after else None
        yield 'noSpaceAfterPunct', len(after), example

    def _subject_verb_agreement(self, text: str):
        examples = []
        for match in self._sva_re.finditer(text):
            if self.lenient:
                preceding = self.PRECEDING_WORD_RE.search(text[max(0, match.start() - 30):match.start()])
                if preceding and preceding.group(1).lower() in self.SVA_ALLOWED_BEFORE:
                    continue
            examples.append(match.group())
        return 'sva3rd', len(examples), examples[0] if examples else None


_default_checker: Optional[GrammarHeuristics] = None


def check_grammar(text: str, lexicon: Lexicon = DEFAULT_LEXICON,
                  lenient: bool = False) -> GrammarReport:
    """Run the heuristic grammar rules over ``text``."""
    global _default_checker
    if lexicon is not DEFAULT_LEXICON or lenient:
        return GrammarHeuristics(lexicon, lenient=lenient).check(text)
    if _default_checker is None:
        _default_checker = GrammarHeuristics()
    return _default_checker.check(text)
