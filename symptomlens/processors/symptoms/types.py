"""
Shared data types for the symptom extraction pipeline.

All stages of the pipeline (segmentation, explicit lists, matching,
organization, reporting) use these dataclasses to pass data between each other.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from ._text_utils import parse_service_date

UNKNOWN_KEY = "Unknown"

# Section types
CHIEF_COMPLAINT = "chief_complaint"
HISTORY = "history"
SYMPTOMS = "symptoms"
PHYSICAL_EXAM = "physical_exam"
ASSESSMENT = "assessment"
PLAN = "plan"
MEDICATION = "medication"
ALLERGIES = "allergies"
DEFAULT_SECTION = "default"

# Sections that rarely carry genuine symptom mentions
EXCLUDED_SECTION_TYPES = frozenset({MEDICATION, PLAN, ALLERGIES})

# Reporting contexts of explicit symptom lists
PATIENT_REPORT = "patient_report"
REPORT_EXPERIENCING = "report_experiencing"
SYMPTOM_LIST = "symptom_list"
PRESENTS_WITH = "presents_with"

# Match types
EXPLICIT_SYMPTOM_LIST = "explicit_symptom_list"
SECTION_CONTEXT_MATCH = "section_context_match"
SUBSTRING_OCCURRENCE = "substring_occurrence"

SYMPTOM_KIND = "Symptom"
PROBLEM_KIND = "Problem"


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-empty value among *keys* in *data*."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class ClinicalNote:
    """A single clinical note for one patient."""

    patient_id: str
    note_id: str
    text: str
    service_date: Optional[date] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClinicalNote":
        """Build a note from a feed row.

        Accepts engine field names as well as the column names used by the
        notes feed (``note_text``, ``dos_date``, ...). Missing ``patient_id``
        or ``text`` are kept as empty strings; the orchestrator skips them.
        """
        patient_id = _first_present(data, "patient_id", "patientId")
        note_id = _first_present(data, "note_id", "noteId", "id")
        text = _first_present(data, "text", "note_text", "noteText")
        service_date = _first_present(
            data, "service_date", "serviceDate", "dos_date", "date_of_service", "dosDate"
        )
        return cls(
            patient_id="" if patient_id is None else str(patient_id),
            note_id=str(note_id) if note_id is not None else f"note_{uuid.uuid4().hex[:12]}",
            text="" if text is None else str(text),
            service_date=parse_service_date(service_date) or date.today(),
        )


@dataclass(frozen=True)
class VocabularyEntry:
    """One reference symptom (or problem) phrase with its diagnosis metadata."""

    id: str
    phrase: str
    diagnosis: Optional[str] = None
    diagnostic_category: Optional[str] = None
    diagnosis_code: Optional[str] = None
    kind: str = SYMPTOM_KIND
    hrsn_mapping: Optional[str] = None

    @property
    def effective_diagnosis_code(self) -> str:
        """Diagnosis code, or the id prefix before the first ``.`` when unset."""
        if self.diagnosis_code:
            return self.diagnosis_code
        return self.id.split(".")[0] if self.id else UNKNOWN_KEY

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VocabularyEntry":
        """Build an entry from a vocabulary row.

        Raises:
            ValueError: if the row has no id or no phrase.
        """
        entry_id = _optional_str(_first_present(data, "id", "symptom_id", "symptomId"))
        phrase = _first_present(data, "phrase", "symptom_segment", "symptomSegment")
        if entry_id is None:
            raise ValueError("vocabulary entry has no id")
        if not isinstance(phrase, str) or not phrase.strip():
            raise ValueError(f"vocabulary entry {entry_id!r} has no phrase")
        return cls(
            id=entry_id,
            phrase=phrase,
            diagnosis=_optional_str(_first_present(data, "diagnosis")),
            diagnostic_category=_optional_str(
                _first_present(data, "diagnostic_category", "diagnosticCategory", "category")
            ),
            diagnosis_code=_optional_str(
                _first_present(data, "diagnosis_code", "diagnosisCode", "diagnosis_icd10_code")
            ),
            kind=_optional_str(_first_present(data, "kind", "symp_prob")) or SYMPTOM_KIND,
            hrsn_mapping=_optional_str(_first_present(data, "hrsn_mapping", "hrsnMapping")),
        )


@dataclass
class Section:
    """A labeled span of a normalized clinical note."""

    type: str
    text: str
    start_offset: int
    end_offset: int


@dataclass
class ExplicitSymptomList:
    """Phrases following an assertive reporting verb ("patient reports ...")."""

    reporting_context: str
    raw_text: str
    phrases: List[str] = field(default_factory=list)


@dataclass
class MatchRecord:
    """One matched vocabulary entry in one note."""

    vocabulary_id: str
    phrase: str
    match_type: str
    section_type: str
    confidence: float
    diagnosis: Optional[str] = None
    diagnostic_category: Optional[str] = None
    diagnosis_code: Optional[str] = None
    kind: str = SYMPTOM_KIND
    reporting_context: Optional[str] = None
    negated: bool = False
    # Note identity and extraction metadata (stamped by the orchestrator)
    patient_id: Optional[str] = None
    note_id: Optional[str] = None
    service_date: Optional[date] = None
    extraction_version: Optional[str] = None
    extraction_method: Optional[str] = None
    extraction_timestamp: Optional[str] = None
    # Character offset in the note (positional matchers only)
    position: Optional[int] = None
    hrsn_domain: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: VocabularyEntry, **kwargs: Any) -> "MatchRecord":
        """Create a record carrying *entry*'s reference metadata."""
        from .hrsn import hrsn_domain_for

        return cls(
            vocabulary_id=entry.id,
            phrase=entry.phrase,
            diagnosis=entry.diagnosis,
            diagnostic_category=entry.diagnostic_category,
            diagnosis_code=entry.effective_diagnosis_code,
            kind=entry.kind,
            hrsn_domain=hrsn_domain_for(entry),
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable persistence row."""
        from .hrsn import hrsn_columns

        row: Dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        if self.service_date is not None:
            row["service_date"] = self.service_date.isoformat()
        row.update(hrsn_columns(self))
        return row


@dataclass
class OrganizedIndex:
    """Four parallel views over the same match records."""

    by_symptom_segment: Dict[str, List[MatchRecord]] = field(default_factory=dict)
    by_diagnosis: Dict[str, List[MatchRecord]] = field(default_factory=dict)
    by_category: Dict[str, List[MatchRecord]] = field(default_factory=dict)
    by_diagnosis_code: Dict[str, List[MatchRecord]] = field(default_factory=dict)

    def dimensions(self) -> Dict[str, Dict[str, List[MatchRecord]]]:
        return {
            "by_symptom_segment": self.by_symptom_segment,
            "by_diagnosis": self.by_diagnosis,
            "by_category": self.by_category,
            "by_diagnosis_code": self.by_diagnosis_code,
        }

    def merge(self, other: "OrganizedIndex") -> None:
        """Append *other*'s buckets onto this index in place."""
        mine = self.dimensions()
        for name, buckets in other.dimensions().items():
            target = mine[name]
            for key, records in buckets.items():
                target.setdefault(key, []).extend(records)

    def summary(self) -> Dict[str, int]:
        """Number of distinct keys per dimension."""
        return {name: len(buckets) for name, buckets in self.dimensions().items()}


@dataclass
class NoteFailure:
    """A note whose processing raised; it contributed zero matches."""

    patient_id: str
    note_id: str
    error: str


@dataclass
class ExtractionResult:
    """The full output of one extraction batch."""

    matches: List[MatchRecord] = field(default_factory=list)
    organized_index: Optional[OrganizedIndex] = None
    version: str = ""
    total_extracted: int = 0
    failures: List[NoteFailure] = field(default_factory=list)
    notes_processed: int = 0
    notes_skipped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        d: Dict[str, Any] = {
            "version": self.version,
            "total_extracted": self.total_extracted,
            "notes_processed": self.notes_processed,
            "notes_skipped": self.notes_skipped,
            "matches": [m.to_dict() for m in self.matches],
            "failures": [
                {"patient_id": f.patient_id, "note_id": f.note_id, "error": f.error}
                for f in self.failures
            ],
        }
        if self.organized_index is not None:
            d["organization_summary"] = self.organized_index.summary()
        return d


_OPTION_ALIASES = {
    "preserveDuplicates": "preserve_duplicates",
    "debugMode": "debug",
    "useWordBoundaries": "use_word_boundaries",
    "considerNegation": "consider_negation",
    "minSymptomLength": "min_phrase_length",
    "detectSectionHeaders": "detect_section_headers",
}


@dataclass(frozen=True)
class ExtractionOptions:
    """Per-call matching options."""

    # Accepted for compatibility; dedup is per vocabulary id per note regardless
    preserve_duplicates: bool = True
    debug: bool = False
    use_word_boundaries: bool = True
    consider_negation: bool = True
    min_phrase_length: int = 3
    detect_section_headers: bool = True

    @classmethod
    def from_mapping(
        cls,
        data: Optional[Mapping[str, Any]],
        base: Optional["ExtractionOptions"] = None,
    ) -> "ExtractionOptions":
        """Build options from *data*, falling back to *base* for unset keys."""
        values = dict(vars(base or cls()))
        for key, value in (data or {}).items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in values:
                raise ValueError(
                    f"Unknown extraction option: {key!r}. Available: {sorted(values)}"
                )
            values[name] = value
        return cls(**values)
