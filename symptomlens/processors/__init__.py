"""
SymptomLens Processors Module

Provides the symptom extraction processor and its pipeline stages.
"""

from .symptoms import (
    ExtractionResult,
    SymptomExtractor,
)

__all__ = [
    "SymptomExtractor",
    "ExtractionResult",
]
