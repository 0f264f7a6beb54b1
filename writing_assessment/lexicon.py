"""
Static Word Lists
=================
Fixed vocabularies used by the assessment engine: linking phrases,
contractions, formality cues, coverage stop words, the misspelling map and
the acronym ignore-set.

All lists live in an immutable ``Lexicon`` that is built once per process
and passed into the otherwise stateless checking functions.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Tuple, Union

__version__ = "1.2.0"

# One or more letters (incl. accented Latin, but not × or ÷), optionally an internal
# apostrophe followed by more letters.
WORD_PATTERN = r"[A-Za-zÀ-ÖØ-öø-ž]+(?:['’][A-Za-zÀ-ÖØ-öø-ž]+)?"
WORD_RE = re.compile(WORD_PATTERN)


LINKING_WORDS: Tuple[str, ...] = (
    "firstly", "secondly", "however", "moreover", "therefore", "in addition",
    "for example", "for instance", "on the other hand", "as a result",
    "furthermore", "nevertheless", "in conclusion", "to sum up",
)

CONTRACTIONS: Tuple[str, ...] = (
    "I'm", "I've", "I'd", "I'll", "isn't", "aren't", "don't", "doesn't",
    "didn't", "won't", "can't", "couldn't", "shouldn't", "it's", "that's",
    "there's", "we're", "they're",
)

FORMALITY_CUES: Tuple[str, ...] = (
    "dear sir or madam", "to whom it may concern", "i am writing to",
    "yours faithfully", "yours sincerely", "best regards", "regards",
    "introduction", "findings", "recommendations", "conclusion",
    "background", "analysis",
)

STOP_WORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "and", "or", "to", "for", "of", "in", "on", "at",
    "with", "about", "from", "is", "are", "be", "as", "by", "that", "this",
    "these", "those",
})

# Lowercase misspelling -> correction
COMMON_MISSPELLINGS = {
    "recieve": "receive",
    "recieved": "received",
    "seperate": "separate",
    "definately": "definitely",
    "occurence": "occurrence",
    "adress": "address",
    "accomodation": "accommodation",
    "acheive": "achieve",
    "beleive": "believe",
    "enviroment": "environment",
    "goverment": "government",
    "independant": "independent",
    "inteligent": "intelligent",
    "neccessary": "necessary",
    "posession": "possession",
    "recomend": "recommend",
    "suceed": "succeed",
    "thier": "their",
    "teh": "the",
    "embarass": "embarrass",
    "publically": "publicly",
    "arguement": "argument",
    "concensus": "consensus",
    "liason": "liaison",
    "maintanance": "maintenance",
    "mesage": "message",
    "tommorow": "tomorrow",
    "untill": "until",
    "wich": "which",
    "begining": "beginning",
    "calender": "calendar",
    "comittee": "committee",
    "existance": "existence",
    "foriegn": "foreign",
    "responsability": "responsibility",
    "sincerly": "sincerely",
    "truely": "truly",
    "wierd": "weird",
}

# Short acronyms never flagged by the lexical checker
IGNORE_WORDS: FrozenSet[str] = frozenset({
    "ok", "eu", "un", "uk", "usa", "nato", "stanag", "hq", "it", "ict",
    "pdf", "cv", "etc", "mr", "mrs", "ms", "dr", "re", "cc", "bcc",
})

# Base-form verbs checked after he/she/it
BASE_VERBS: Tuple[str, ...] = (
    "do", "go", "need", "want", "say", "work", "write", "use", "think",
    "plan", "ask", "tell", "make", "like", "call", "know", "see", "seem",
    "look", "take", "give", "move", "help", "require", "expect", "include",
)


def _normalize_map(raw: Mapping[str, str]) -> dict:
    """Lower-case keys and values, dropping empty or identity entries."""
    out = {}
    for key, value in raw.items():
        key = (key or "").strip().lower()
        value = (value or "").strip().lower()
        if not key or not value or key == value:
            continue
        out[key] = value
    return out


@dataclass(frozen=True)
class Lexicon:
    """Immutable bundle of the fixed vocabularies."""
    linking_words: Tuple[str, ...] = LINKING_WORDS
    contractions: Tuple[str, ...] = CONTRACTIONS
    formality_cues: Tuple[str, ...] = FORMALITY_CUES
    stop_words: FrozenSet[str] = STOP_WORDS
    misspellings: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(_normalize_map(COMMON_MISSPELLINGS))
    )
    ignore_words: FrozenSet[str] = IGNORE_WORDS
    base_verbs: Tuple[str, ...] = BASE_VERBS

    @classmethod
    def build(
        cls,
        misspellings: Optional[Mapping[str, str]] = None,
        ignore_words: Optional[Iterable[str]] = None,
        **overrides
    ) -> 'Lexicon':
        """Create a lexicon with some lists replaced, normalizing the inputs."""
        if misspellings is not None:
            overrides['misspellings'] = MappingProxyType(_normalize_map(misspellings))
        if ignore_words is not None:
            overrides['ignore_words'] = frozenset(w.lower() for w in ignore_words)
        for name in ('linking_words', 'contractions', 'formality_cues', 'base_verbs'):
            if name in overrides:
                overrides[name] = tuple(overrides[name])
        if 'stop_words' in overrides:
            overrides['stop_words'] = frozenset(overrides['stop_words'])
        return cls(**overrides)


DEFAULT_LEXICON = Lexicon()


def load_word_list(path: Union[str, Path]) -> FrozenSet[str]:
    """
    Load a flat dictionary file: one word per line, UTF-8.

    Blank lines and ``#`` comments are skipped; words are lower-cased.
    Raises OSError when the file cannot be read.
    """
    words = set()
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            word = line.strip().lower()
            if word and not word.startswith('#'):
                words.add(word)
    return frozenset(words)
