"""Health-related social needs (HRSN) columns for problem-type matches."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from .types import PROBLEM_KIND

if TYPE_CHECKING:
    from .types import MatchRecord, VocabularyEntry

HRSN_DOMAINS = (
    "housing_status",
    "food_status",
    "financial_status",
    "transportation_needs",
    "has_a_car",
    "utility_insecurity",
    "childcare_needs",
    "elder_care_needs",
    "employment_status",
    "education_needs",
    "legal_needs",
    "social_isolation",
)

PROBLEM_IDENTIFIED = "Problem Identified"
ZCODE_HRSN = "ZCode/HRSN"


def hrsn_domain_for(entry: "VocabularyEntry") -> Optional[str]:
    """HRSN domain of a problem entry, or None for symptoms and unknown mappings."""
    if entry.kind != PROBLEM_KIND or not entry.hrsn_mapping:
        return None
    mapping = entry.hrsn_mapping.strip().lower()
    return mapping if mapping in HRSN_DOMAINS else None


def hrsn_columns(record: "MatchRecord") -> Dict[str, Any]:
    """Persistence columns: one per domain plus the ``zcode_hrsn`` flag."""
    columns: Dict[str, Any] = {domain: None for domain in HRSN_DOMAINS}
    if record.hrsn_domain in columns:
        columns[record.hrsn_domain] = PROBLEM_IDENTIFIED
    columns["zcode_hrsn"] = ZCODE_HRSN if record.kind == PROBLEM_KIND else "No"
    return columns
