"""
Section segmentation: splits a normalized note into labeled clinical sections
by locating known header spellings.
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .._text_utils import find_all
from ..types import (
    ALLERGIES,
    ASSESSMENT,
    CHIEF_COMPLAINT,
    HISTORY,
    MEDICATION,
    PHYSICAL_EXAM,
    PLAN,
    SYMPTOMS,
    Section,
)

logger = logging.getLogger(__name__)

# Ordered header table: section type → header spellings (normalized, lower-case)
SECTION_HEADERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (CHIEF_COMPLAINT, ("chief complaint:", "cc:", "reason for visit:")),
    (
        HISTORY,
        (
            "history:",
            "history of present illness:",
            "hpi:",
            "past medical history:",
            "pmh:",
        ),
    ),
    (SYMPTOMS, ("symptoms:", "subjective:", "patient reports:")),
    (PHYSICAL_EXAM, ("physical exam:", "examination:", "pe:")),
    (ASSESSMENT, ("assessment:", "impression:", "diagnosis:")),
    (PLAN, ("plan:", "treatment plan:", "recommendations:")),
    (MEDICATION, ("medications:", "meds:", "current medications:")),
    (ALLERGIES, ("allergies:", "drug allergies:")),
)


class _HeaderHit(NamedTuple):
    index: int
    type: str
    pattern: str


class SectionSegmenter:
    """Locate section headers and cut the text between consecutive headers."""

    def __init__(self, headers: Optional[Sequence[Tuple[str, Sequence[str]]]] = None):
        self._headers = tuple(
            (section_type, tuple(patterns))
            for section_type, patterns in (headers if headers is not None else SECTION_HEADERS)
        )

    @property
    def section_types(self) -> List[str]:
        return [section_type for section_type, _ in self._headers]

    def segment(self, normalized_text: str) -> List[Section]:
        """Split *normalized_text* into sections.

        Returns an empty list when no header is present; callers decide how
        to treat unstructured prose.
        """
        hits: List[_HeaderHit] = []
        for section_type, patterns in self._headers:
            for pattern in patterns:
                for index in find_all(normalized_text, pattern):
                    hits.append(_HeaderHit(index, section_type, pattern))

        if not hits:
            return []

        # Stable sort: table order breaks ties at the same index
        hits.sort(key=lambda h: h.index)

        sections: List[Section] = []
        for i, hit in enumerate(hits):
            start = hit.index + len(hit.pattern)
            end = hits[i + 1].index if i + 1 < len(hits) else len(normalized_text)
            sections.append(
                Section(
                    type=hit.type,
                    text=normalized_text[start:end].strip(),
                    start_offset=start,
                    end_offset=end,
                )
            )

        logger.debug(
            "Identified %d sections: %s", len(sections), [s.type for s in sections]
        )
        return sections


_DEFAULT_SEGMENTER = SectionSegmenter()


def identify_sections(normalized_text: str) -> List[Section]:
    """Segment *normalized_text* with the default header table."""
    return _DEFAULT_SEGMENTER.segment(normalized_text)
