"""Abstract base class for symptom matching strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Optional, Sequence

from .._text_utils import normalize_text
from ..types import ExtractionOptions, MatchRecord, VocabularyEntry


class SymptomMatcher(ABC):
    """Interface that every matching strategy must implement."""

    #: Static metadata: version, name, description, release_date, features, parameters
    version_info: ClassVar[Dict[str, Any]] = {}

    @property
    def version(self) -> str:
        return self.version_info["version"]

    @property
    @abstractmethod
    def extraction_method(self) -> str:
        """Short identifier stamped on every record (e.g. ``"context_aware_matching"``)."""

    def normalize(self, text: str) -> str:
        """Canonical form of a note's text before matching."""
        return normalize_text(text)

    def prepare(
        self,
        vocabulary: Sequence[VocabularyEntry],
        options: Optional[ExtractionOptions] = None,
    ) -> None:
        """Precompute per-vocabulary state once per extraction call."""

    @abstractmethod
    def match(
        self,
        normalized_text: str,
        vocabulary: Sequence[VocabularyEntry],
        options: Optional[ExtractionOptions] = None,
    ) -> List[MatchRecord]:
        """Match *vocabulary* against one normalized note."""
