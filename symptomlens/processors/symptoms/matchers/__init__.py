"""Symptom matching strategies."""

from .base import SymptomMatcher
from .context_aware import ContextAwareMatcher
from .engine import DEFAULT_VERSION, available_versions, create_matcher
from .legacy import LegacySubstringMatcher

__all__ = [
    "SymptomMatcher",
    "ContextAwareMatcher",
    "LegacySubstringMatcher",
    "create_matcher",
    "available_versions",
    "DEFAULT_VERSION",
]
