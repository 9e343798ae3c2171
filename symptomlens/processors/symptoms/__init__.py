"""
SymptomLens symptom extraction subpackage.

Modular pipeline: Normalize → Sections → Explicit lists → Matcher (negation) → Organizer
"""

from ._text_utils import normalize_text
from .comparison import compare_strategies
from .context import NegationDetector, extract_explicit_lists, is_negated
from .ingestion import load_notes, load_vocabulary
from .matchers import (
    ContextAwareMatcher,
    LegacySubstringMatcher,
    SymptomMatcher,
    available_versions,
    create_matcher,
)
from .organizer import organize_matches
from .persistence import InMemorySink, JSONLinesSink, ResultSink, save_extraction_results
from .processor import VERSION_INFO, SymptomExtractor, extract_symptoms
from .reporting import generate_extraction_report, summary_statistics
from .sections import SectionSegmenter, identify_sections
from .types import (
    UNKNOWN_KEY,
    ClinicalNote,
    ExplicitSymptomList,
    ExtractionOptions,
    ExtractionResult,
    MatchRecord,
    NoteFailure,
    OrganizedIndex,
    Section,
    VocabularyEntry,
)

__all__ = [
    "SymptomExtractor",
    "extract_symptoms",
    "VERSION_INFO",
    "ClinicalNote",
    "VocabularyEntry",
    "Section",
    "ExplicitSymptomList",
    "MatchRecord",
    "OrganizedIndex",
    "ExtractionOptions",
    "ExtractionResult",
    "NoteFailure",
    "UNKNOWN_KEY",
    "normalize_text",
    "SectionSegmenter",
    "identify_sections",
    "extract_explicit_lists",
    "is_negated",
    "NegationDetector",
    "SymptomMatcher",
    "ContextAwareMatcher",
    "LegacySubstringMatcher",
    "create_matcher",
    "available_versions",
    "organize_matches",
    "generate_extraction_report",
    "summary_statistics",
    "compare_strategies",
    "ResultSink",
    "InMemorySink",
    "JSONLinesSink",
    "save_extraction_results",
    "load_notes",
    "load_vocabulary",
]
