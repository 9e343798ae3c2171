"""
SymptomExtractor: thin orchestrator running the matching pipeline over a batch.

Per note: normalize, then the configured matcher (segment, explicit lists,
section matching with negation), then stamp and merge into the batch result.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Set, Tuple, Union

from .matchers import ContextAwareMatcher, SymptomMatcher, available_versions, create_matcher
from .organizer import organize_matches
from .persistence import ResultSink, save_extraction_results
from .reporting import generate_extraction_report, summary_statistics
from .types import (
    ClinicalNote,
    ExtractionOptions,
    ExtractionResult,
    MatchRecord,
    NoteFailure,
    OrganizedIndex,
    VocabularyEntry,
)

logger = logging.getLogger(__name__)

VERSION_INFO: Dict[str, Any] = ContextAwareMatcher.version_info

# Default configuration: the v3.2 matcher, serial processing
DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "v3.2",
    "options": {
        "preserve_duplicates": True,
        "debug": False,
        "use_word_boundaries": True,
        "consider_negation": True,
        "min_phrase_length": 3,
        "detect_section_headers": True,
    },
    "negation": {
        "window": 50,
    },
    "parallel": {
        "max_workers": 1,
    },
    "persistence": {
        "batch_size": 100,
    },
}

OptionsLike = Union[ExtractionOptions, Mapping, None]


def _deep_merge(default: Dict, override: Dict) -> Dict:
    """Recursively merge *override* into *default*."""
    result = default.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _require_collection(value: Any, name: str) -> List[Any]:
    """Materialize *value* as a list, rejecting non-collections up front."""
    if value is None or isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise TypeError(
            f"{name} must be an iterable of records, got {type(value).__name__}"
        )
    return list(value)


def coerce_vocabulary(vocabulary: Iterable[Any]) -> List[VocabularyEntry]:
    """Convert rows into VocabularyEntry objects, skipping malformed ones."""
    entries: List[VocabularyEntry] = []
    for row in vocabulary:
        if isinstance(row, VocabularyEntry):
            if isinstance(row.id, str) and row.id and isinstance(row.phrase, str) and row.phrase.strip():
                entries.append(row)
            else:
                logger.debug("Skipping vocabulary entry %r: missing id or phrase", row.id)
            continue
        if not isinstance(row, Mapping):
            logger.debug("Skipping vocabulary row of type %s", type(row).__name__)
            continue
        try:
            entries.append(VocabularyEntry.from_dict(row))
        except ValueError as exc:
            logger.debug("Skipping vocabulary row: %s", exc)
    return entries


def _coerce_note(row: Any) -> Optional[ClinicalNote]:
    if isinstance(row, ClinicalNote):
        return row
    if isinstance(row, Mapping):
        return ClinicalNote.from_dict(row)
    return None


class SymptomExtractor:
    """
    Batch symptom extraction over clinical notes.

    Example::

        extractor = SymptomExtractor()
        result = extractor.extract(notes, vocabulary, {"debug": True})
        print(result.total_extracted, result.organized_index.summary())

    The legacy v3.0 strategy is selected through configuration::

        SymptomExtractor({"version": "v3.0"})
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = _deep_merge(DEFAULT_CONFIG, config or {})
        self.logger = logging.getLogger(__name__)
        self.matcher: SymptomMatcher = create_matcher(self.config["version"], self.config)
        self.default_options = ExtractionOptions.from_mapping(self.config.get("options"))

    @property
    def version(self) -> str:
        return self.matcher.version

    @property
    def version_info(self) -> Dict[str, Any]:
        return dict(self.matcher.version_info)

    @staticmethod
    def available_versions() -> List[Dict[str, Any]]:
        return available_versions()

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def extract(
        self,
        notes: Iterable[Any],
        vocabulary: Iterable[Any],
        options: OptionsLike = None,
    ) -> ExtractionResult:
        """Extract symptom matches from *notes* against *vocabulary*.

        Args:
            notes: ClinicalNote objects or note rows (mappings).
            vocabulary: VocabularyEntry objects or vocabulary rows (mappings).
            options: ExtractionOptions or a mapping overriding the configured
                defaults (``debug``, ``use_word_boundaries``, ...).

        Raises:
            TypeError: if *notes* or *vocabulary* is not a collection.
        """
        note_rows = _require_collection(notes, "notes")
        vocabulary_rows = _require_collection(vocabulary, "vocabulary")
        options = self._resolve_options(options)

        start = time.perf_counter()
        entries = coerce_vocabulary(vocabulary_rows)
        self.matcher.prepare(entries, options)

        pending, skipped = self._select_notes(note_rows)
        result = ExtractionResult(
            version=self.version,
            organized_index=OrganizedIndex() if options.debug else None,
            notes_skipped=skipped,
        )

        for note, records, error in self._run(pending, entries, options):
            if error is not None:
                self.logger.error(
                    "Error processing note %s for patient %s: %s",
                    note.note_id,
                    note.patient_id,
                    error,
                    exc_info=error,
                )
                result.failures.append(
                    NoteFailure(patient_id=note.patient_id, note_id=note.note_id, error=str(error))
                )
                continue
            result.notes_processed += 1
            result.matches.extend(records)
            if result.organized_index is not None:
                result.organized_index.merge(organize_matches(records))

        result.total_extracted = len(result.matches)
        self.logger.info(
            "Extraction %s complete in %.2fs: %d matches from %d notes "
            "(%d skipped, %d failed, %d vocabulary entries)",
            self.version,
            time.perf_counter() - start,
            result.total_extracted,
            result.notes_processed,
            result.notes_skipped,
            len(result.failures),
            len(entries),
        )
        return result

    def extract_note(
        self,
        note: Union[ClinicalNote, Mapping],
        vocabulary: Iterable[Any],
        options: OptionsLike = None,
    ) -> List[MatchRecord]:
        """Match a single note; errors propagate to the caller."""
        entries = coerce_vocabulary(_require_collection(vocabulary, "vocabulary"))
        resolved = self._resolve_options(options)
        self.matcher.prepare(entries, resolved)
        clinical_note = _coerce_note(note)
        if clinical_note is None:
            raise TypeError(f"note must be a ClinicalNote or mapping, got {type(note).__name__}")
        return self._process_note(clinical_note, entries, resolved)

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    def generate_report(self, result: ExtractionResult) -> str:
        return generate_extraction_report(result)

    def get_summary_statistics(self, result: ExtractionResult) -> Dict[str, Any]:
        return summary_statistics(result)

    def save(self, result: ExtractionResult, sink: ResultSink) -> Dict[str, Any]:
        """Write *result* to *sink* in configured batch sizes."""
        batch_size = self.config.get("persistence", {}).get("batch_size", 100)
        return save_extraction_results(result, sink, batch_size=batch_size)

    # ------------------------------------------------------------------
    # Internal pipeline
    # ------------------------------------------------------------------

    def _resolve_options(self, options: OptionsLike) -> ExtractionOptions:
        if isinstance(options, ExtractionOptions):
            return options
        return ExtractionOptions.from_mapping(options, base=self.default_options)

    def _select_notes(self, rows: Sequence[Any]) -> Tuple[List[ClinicalNote], int]:
        """Drop notes without text or patient id and repeated (patient, note) keys."""
        selected: List[ClinicalNote] = []
        seen: Set[Tuple[str, str]] = set()
        skipped = 0
        for row in rows:
            note = _coerce_note(row)
            if note is None or not note.text or not note.patient_id:
                skipped += 1
                continue
            key = (note.patient_id, note.note_id)
            if key in seen:
                skipped += 1
                continue
            seen.add(key)
            selected.append(note)
        return selected, skipped

    def _run(
        self,
        notes: List[ClinicalNote],
        entries: List[VocabularyEntry],
        options: ExtractionOptions,
    ) -> Iterator[Tuple[ClinicalNote, List[MatchRecord], Optional[Exception]]]:
        """Yield ``(note, records, error)`` in input order."""
        max_workers = int(self.config.get("parallel", {}).get("max_workers", 1) or 1)

        if max_workers <= 1 or len(notes) <= 1:
            for note in notes:
                yield (note, *self._guarded(self._process_note, note, entries, options))
            return

        # Parallel map, sequential reduce: results are consumed in submission order
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(self._guarded, self._process_note, note, entries, options)
                for note in notes
            ]
            for note, future in zip(notes, futures):
                yield (note, *future.result())

    @staticmethod
    def _guarded(
        func: Callable[..., List[MatchRecord]], *args: Any
    ) -> Tuple[List[MatchRecord], Optional[Exception]]:
        try:
            return func(*args), None
        except Exception as exc:
            return [], exc

    def _process_note(
        self,
        note: ClinicalNote,
        entries: List[VocabularyEntry],
        options: ExtractionOptions,
    ) -> List[MatchRecord]:
        normalized = self.matcher.normalize(note.text)
        records = self.matcher.match(normalized, entries, options)
        timestamp = datetime.now(timezone.utc).isoformat()
        for record in records:
            record.patient_id = note.patient_id
            record.note_id = note.note_id
            record.service_date = note.service_date
            record.extraction_version = self.matcher.version
            record.extraction_method = self.matcher.extraction_method
            record.extraction_timestamp = timestamp
        self.logger.debug(
            "Note %s (patient %s): %d matches", note.note_id, note.patient_id, len(records)
        )
        return records


def extract_symptoms(
    notes: Iterable[Any],
    vocabulary: Iterable[Any],
    options: OptionsLike = None,
    config: Optional[Dict[str, Any]] = None,
) -> ExtractionResult:
    """One-shot extraction with a fresh SymptomExtractor."""
    return SymptomExtractor(config).extract(notes, vocabulary, options)
