"""Explicitly reported symptom lists ("patient reports X, Y and Z")."""

from __future__ import annotations

import re
from typing import List, Pattern, Tuple

from ..types import (
    PATIENT_REPORT,
    PRESENTS_WITH,
    REPORT_EXPERIENCING,
    SYMPTOM_LIST,
    ExplicitSymptomList,
)

# Each template captures lazily up to a period, a newline or the end of text
_REPORTING_TEMPLATES: Tuple[Tuple[Pattern[str], str], ...] = (
    (
        re.compile(
            r"(?:patient|client)\s+(?:reports?|complains of|presents with|states?)\s+([^.]+?)(?:\.|\n|$)",
            re.IGNORECASE,
        ),
        PATIENT_REPORT,
    ),
    (
        re.compile(r"reports?\s+(?:experiencing|having|with)\s+([^.]+?)(?:\.|\n|$)", re.IGNORECASE),
        REPORT_EXPERIENCING,
    ),
    (
        re.compile(r"symptoms?\s+(?:include|consist of|are|is)\s+([^.]+?)(?:\.|\n|$)", re.IGNORECASE),
        SYMPTOM_LIST,
    ),
    (
        re.compile(r"presents?\s+with\s+([^.]+?)(?:\.|\n|$)", re.IGNORECASE),
        PRESENTS_WITH,
    ),
)

_LIST_SEPARATORS = re.compile(r",\s*|\s+and\s+|\s+or\s+")


def split_phrase_list(raw_text: str) -> List[str]:
    """Split a captured list on commas and the conjunctions and/or."""
    return [part.strip() for part in _LIST_SEPARATORS.split(raw_text) if part.strip()]


def extract_explicit_lists(normalized_text: str) -> List[ExplicitSymptomList]:
    """Find every reporting-verb list in *normalized_text*.

    Templates run independently, so one sentence can yield several lists.
    """
    lists: List[ExplicitSymptomList] = []
    for regex, context in _REPORTING_TEMPLATES:
        for match in regex.finditer(normalized_text):
            raw_text = match.group(1)
            if not raw_text:
                continue
            phrases = split_phrase_list(raw_text)
            if phrases:
                lists.append(
                    ExplicitSymptomList(
                        reporting_context=context, raw_text=raw_text, phrases=phrases
                    )
                )
    return lists
