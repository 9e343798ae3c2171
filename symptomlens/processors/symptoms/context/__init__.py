"""Context cues: explicit reporting lists and negation."""

from .explicit_lists import extract_explicit_lists
from .negation import NEGATION_WINDOW, NegationDetector, is_negated

__all__ = [
    "extract_explicit_lists",
    "is_negated",
    "NegationDetector",
    "NEGATION_WINDOW",
]
