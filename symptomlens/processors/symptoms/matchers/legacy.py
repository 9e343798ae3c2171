"""
Legacy substring matcher (v3.0).

Counts every occurrence of every candidate phrase, for symptom intensity
measurement. No section awareness and no negation handling.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..types import (
    DEFAULT_SECTION,
    SUBSTRING_OCCURRENCE,
    ExtractionOptions,
    MatchRecord,
    VocabularyEntry,
)
from .base import SymptomMatcher

logger = logging.getLogger(__name__)

LEGACY_CONFIDENCE = 1.0


def _first_word(phrase: str) -> str:
    return phrase.lower().split(" ")[0]


class LegacySubstringMatcher(SymptomMatcher):
    """Positional substring matcher, bucketed by the phrase's first word."""

    version_info = {
        "version": "v3.0",
        "name": "Positional Substring Extractor",
        "description": "Substring extraction counting every mention of each symptom for intensity measurement",
        "release_date": "2025-04-30",
        "features": [
            "Longer phrases are matched before their shorter prefixes",
            "Candidate phrases are pre-filtered by first word",
            "Every occurrence is recorded with its character position",
            "HRSN problem indicators mapped to social-needs columns",
        ],
        "parameters": {},
    }

    def __init__(self):
        # (vocabulary, buckets) replaced as a single reference
        self._prepared: Optional[Tuple[Sequence[VocabularyEntry], Dict[str, List[VocabularyEntry]]]] = None

    @property
    def extraction_method(self) -> str:
        return "positional_substring_matching"

    def normalize(self, text: str) -> str:
        # Positions refer to the original text, so whitespace is left untouched
        return text.lower()

    def prepare(
        self,
        vocabulary: Sequence[VocabularyEntry],
        options: Optional[ExtractionOptions] = None,
    ) -> None:
        buckets = self._build_buckets(vocabulary)
        self._prepared = (vocabulary, buckets)
        logger.debug(
            "Organized %d phrases into %d first-word groups", len(vocabulary), len(buckets)
        )

    def match(
        self,
        normalized_text: str,
        vocabulary: Sequence[VocabularyEntry],
        options: Optional[ExtractionOptions] = None,
    ) -> List[MatchRecord]:
        if not normalized_text:
            return []
        prepared = self._prepared
        if prepared is not None and prepared[0] is vocabulary:
            buckets = prepared[1]
        else:
            buckets = self._build_buckets(vocabulary)

        candidates: List[VocabularyEntry] = []
        # Candidates follow the first appearance of each token
        for word in dict.fromkeys(normalized_text.split()):
            candidates.extend(buckets.get(word, ()))

        seen: Set[Tuple[str, int]] = set()
        matches: List[MatchRecord] = []
        for entry in candidates:
            phrase = entry.phrase.lower()
            position = normalized_text.find(phrase)
            while position != -1:
                if (phrase, position) not in seen:
                    seen.add((phrase, position))
                    matches.append(
                        MatchRecord.from_entry(
                            entry,
                            match_type=SUBSTRING_OCCURRENCE,
                            section_type=DEFAULT_SECTION,
                            confidence=LEGACY_CONFIDENCE,
                            position=position,
                        )
                    )
                position = normalized_text.find(phrase, position + len(phrase))
        return matches

    @staticmethod
    def _build_buckets(vocabulary: Sequence[VocabularyEntry]) -> Dict[str, List[VocabularyEntry]]:
        buckets: Dict[str, List[VocabularyEntry]] = {}
        for entry in sorted(vocabulary, key=lambda e: len(e.phrase), reverse=True):
            buckets.setdefault(_first_word(entry.phrase), []).append(entry)
        return buckets
