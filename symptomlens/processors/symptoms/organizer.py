"""Group match records by symptom, diagnosis, category and diagnosis code."""

from __future__ import annotations

from typing import Iterable, Optional

from .types import UNKNOWN_KEY, MatchRecord, OrganizedIndex


def _key(value: Optional[str]) -> str:
    return value or UNKNOWN_KEY


def organize_matches(matches: Iterable[MatchRecord]) -> OrganizedIndex:
    """Index *matches* four ways in a single pass.

    Records are shared, not copied: every record lands in exactly one bucket
    per dimension.
    """
    index = OrganizedIndex()
    for match in matches:
        index.by_symptom_segment.setdefault(_key(match.phrase), []).append(match)
        index.by_diagnosis.setdefault(_key(match.diagnosis), []).append(match)
        index.by_category.setdefault(_key(match.diagnostic_category), []).append(match)
        index.by_diagnosis_code.setdefault(_key(match.diagnosis_code), []).append(match)
    return index
