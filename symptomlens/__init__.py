"""
SymptomLens: symptom extraction from clinical notes

Main module providing a unified interface over the extraction pipeline,
file loading, reporting and persistence.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

# Import processors
from .processors import SymptomExtractor
from .processors.symptoms import (
    ExtractionResult,
    ResultSink,
    compare_strategies,
    load_notes,
    load_vocabulary,
)

__version__ = "3.2.0"


class SymptomLens:
    """
    Main SymptomLens interface

    Example:
        >>> lens = SymptomLens()
        >>> result = lens.extract(notes, vocabulary, debug=True)
        >>> print(lens.report(result))
    """

    def __init__(self, config: Dict = None):
        """
        Initialize SymptomLens

        Args:
            config: Configuration dictionary with processor-specific settings.
                   Example:
                   {
                       "extraction": {
                           "version": "v3.2",
                           "options": {"consider_negation": True},
                           "parallel": {"max_workers": 4}
                       }
                   }
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)

        extraction_config = self.config.get("extraction", {})
        self.extractor = SymptomExtractor(config=extraction_config)

    def extract(
        self,
        notes: Iterable[Any],
        vocabulary: Iterable[Any],
        **options: Any,
    ) -> ExtractionResult:
        """
        Extract symptoms from clinical notes

        Args:
            notes: ClinicalNote objects or note rows
            vocabulary: VocabularyEntry objects or vocabulary rows
            **options: Extraction options (debug, use_word_boundaries,
                      consider_negation, min_phrase_length, ...)

        Returns:
            ExtractionResult with flat matches and, in debug mode, the organized index
        """
        return self.extractor.extract(notes, vocabulary, options or None)

    def extract_from_files(
        self,
        notes_path: Union[str, Path],
        vocabulary_path: Union[str, Path],
        **options: Any,
    ) -> ExtractionResult:
        """
        Load notes and vocabulary from CSV/Excel/JSON files and extract

        Example:
            >>> lens = SymptomLens()
            >>> result = lens.extract_from_files("notes.csv", "symptom_segments.xlsx")
        """
        notes = load_notes(notes_path)
        vocabulary = load_vocabulary(vocabulary_path)
        self.logger.info(
            "Extracting from %d notes with %d vocabulary entries", len(notes), len(vocabulary)
        )
        return self.extract(notes, vocabulary, **options)

    def report(self, result: ExtractionResult) -> str:
        """Markdown summary of an extraction result"""
        return self.extractor.generate_report(result)

    def save(self, result: ExtractionResult, sink: ResultSink) -> Dict[str, Any]:
        """Hand match rows to a persistence sink in batches"""
        return self.extractor.save(result, sink)

    def compare(
        self,
        notes: Iterable[Any],
        vocabulary: Iterable[Any],
        versions: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Run several matcher versions on the same batch and compare"""
        return compare_strategies(notes, vocabulary, versions=tuple(versions or ("v3.0", "v3.2")))

    def versions(self) -> List[Dict[str, Any]]:
        """Metadata of every available matcher version"""
        return self.extractor.available_versions()


__all__ = ["SymptomLens", "SymptomExtractor", "__version__"]
