"""
Context-aware symptom matcher (v3.2).

Per note: segment into sections, pull explicit reporting lists once, then walk
every symptom-bearing section against the vocabulary. Explicit-list membership
wins over full-text matching; only full-text hits are negation-checked.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Pattern, Sequence, Set

from ..context.explicit_lists import extract_explicit_lists
from ..context.negation import NegationDetector
from ..sections.segmenter import SectionSegmenter
from ..types import (
    DEFAULT_SECTION,
    EXCLUDED_SECTION_TYPES,
    EXPLICIT_SYMPTOM_LIST,
    SECTION_CONTEXT_MATCH,
    ExplicitSymptomList,
    ExtractionOptions,
    MatchRecord,
    Section,
    VocabularyEntry,
)
from .base import SymptomMatcher

logger = logging.getLogger(__name__)

EXPLICIT_LIST_CONFIDENCE = 0.98
SECTION_MATCH_CONFIDENCE = 0.92


class ContextAwareMatcher(SymptomMatcher):
    """Section-, list- and negation-aware matcher."""

    version_info = {
        "version": "v3.2",
        "name": "Context-Aware Symptom Extractor",
        "description": (
            "Advanced symptom extraction with comprehensive organization "
            "and improved context awareness"
        ),
        "release_date": "2025-05-19",
        "features": [
            'Context-aware matching recognizes symptoms following phrases like "patient reports"',
            "Organization by symptom segment, diagnosis, diagnostic category, and ICD-10 code",
            "Preserves duplicate matches for symptom intensity measurement",
            "Enhanced negation detection with reporting phrase overrides",
            "Works with structured and unstructured clinical notes",
        ],
        "parameters": {
            "preserve_duplicates": "Boolean to maintain multiple instances of the same symptom (default: true)",
            "debug": "Boolean to include detailed debugging and organization information (default: false)",
            "use_word_boundaries": "Boolean to require symptoms to appear as distinct words (default: true)",
            "consider_negation": "Boolean to enable detection of negated symptoms (default: true)",
        },
    }

    def __init__(
        self,
        segmenter: Optional[SectionSegmenter] = None,
        negation_detector: Optional[NegationDetector] = None,
    ):
        self.segmenter = segmenter or SectionSegmenter()
        self.negation_detector = negation_detector or NegationDetector()
        # lower-cased phrase → compiled word-boundary pattern (None: fall back to substring)
        self._patterns: Dict[str, Optional[Pattern[str]]] = {}

    @property
    def extraction_method(self) -> str:
        return "context_aware_matching"

    def prepare(
        self,
        vocabulary: Sequence[VocabularyEntry],
        options: Optional[ExtractionOptions] = None,
    ) -> None:
        options = options or ExtractionOptions()
        self._patterns = {}
        if not options.use_word_boundaries:
            return
        for entry in vocabulary:
            self._boundary_pattern(entry.phrase.lower())
        logger.debug("Precompiled %d word-boundary patterns", len(self._patterns))

    def match(
        self,
        normalized_text: str,
        vocabulary: Sequence[VocabularyEntry],
        options: Optional[ExtractionOptions] = None,
    ) -> List[MatchRecord]:
        options = options or ExtractionOptions()
        if not normalized_text:
            return []

        sections = self.segmenter.segment(normalized_text) if options.detect_section_headers else []
        if not sections:
            sections = [
                Section(
                    type=DEFAULT_SECTION,
                    text=normalized_text,
                    start_offset=0,
                    end_offset=len(normalized_text),
                )
            ]

        explicit_lists = extract_explicit_lists(normalized_text)
        if explicit_lists:
            logger.debug(
                "Explicit lists: %s",
                [(lst.reporting_context, lst.phrases) for lst in explicit_lists],
            )

        matches: List[MatchRecord] = []
        matched_ids: Set[str] = set()

        for section in sections:
            if section.type in EXCLUDED_SECTION_TYPES:
                continue
            for entry in vocabulary:
                if entry.id in matched_ids or len(entry.phrase) < options.min_phrase_length:
                    continue
                phrase = entry.phrase.lower()

                listed = self._find_in_lists(phrase, explicit_lists)
                if listed is not None:
                    matches.append(
                        MatchRecord.from_entry(
                            entry,
                            match_type=EXPLICIT_SYMPTOM_LIST,
                            section_type=section.type,
                            confidence=EXPLICIT_LIST_CONFIDENCE,
                            reporting_context=listed.reporting_context,
                            negated=False,
                        )
                    )
                    matched_ids.add(entry.id)
                    continue

                if not self._found_in_text(section.text, phrase, options):
                    continue
                if options.consider_negation and self.negation_detector.is_negated(
                    section.text, phrase
                ):
                    # May still match in a later section without the negating context
                    continue

                matches.append(
                    MatchRecord.from_entry(
                        entry,
                        match_type=SECTION_CONTEXT_MATCH,
                        section_type=section.type,
                        confidence=SECTION_MATCH_CONFIDENCE,
                        negated=False,
                    )
                )
                matched_ids.add(entry.id)

        return matches

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _find_in_lists(
        phrase: str, explicit_lists: Sequence[ExplicitSymptomList]
    ) -> Optional[ExplicitSymptomList]:
        """First list with a phrase containing, or contained in, *phrase*."""
        for explicit in explicit_lists:
            for listed in explicit.phrases:
                listed = listed.lower()
                if phrase in listed or listed in phrase:
                    return explicit
        return None

    def _found_in_text(self, text: str, phrase: str, options: ExtractionOptions) -> bool:
        if not options.use_word_boundaries:
            return phrase in text
        pattern = self._boundary_pattern(phrase)
        if pattern is None:
            return phrase in text
        return pattern.search(text) is not None

    def _boundary_pattern(self, phrase: str) -> Optional[Pattern[str]]:
        if phrase not in self._patterns:
            try:
                self._patterns[phrase] = re.compile(
                    r"\b" + re.escape(phrase) + r"\b", re.IGNORECASE
                )
            except re.error as exc:
                logger.debug("Cannot compile pattern for %r (%s); using substring search", phrase, exc)
                self._patterns[phrase] = None
        return self._patterns[phrase]
