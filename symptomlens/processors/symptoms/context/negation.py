"""
Window-based negation detection with reporting-phrase overrides.

A small local heuristic: only the characters immediately before the first
occurrence of a phrase are inspected, without sentence-boundary awareness.
"""

from __future__ import annotations

from typing import Sequence, Tuple

NEGATION_WINDOW = 50

NEGATION_CUES: Tuple[str, ...] = (
    "no ",
    "not ",
    "denies",
    "denied",
    "negative for",
    "without",
    "absent",
    "doesn't have",
    "does not have",
    "rules out",
    "ruled out",
)

REPORTING_CUES: Tuple[str, ...] = (
    "reports",
    "reported",
    "complains of",
    "presents with",
    "experiencing",
    "having",
    "endorsed",
    "stated",
)


class NegationDetector:
    """Decide whether a phrase is negated by the text just before it."""

    def __init__(
        self,
        window: int = NEGATION_WINDOW,
        negation_cues: Sequence[str] = NEGATION_CUES,
        reporting_cues: Sequence[str] = REPORTING_CUES,
    ):
        if window < 0:
            raise ValueError(f"negation window must be non-negative, got {window}")
        self.window = window
        self.negation_cues = tuple(negation_cues)
        self.reporting_cues = tuple(reporting_cues)

    def is_negated(self, context: str, phrase: str) -> bool:
        """Return True if *phrase* is negated within *context*.

        Both arguments are expected lower-cased. A phrase absent from
        *context* is never negated. The first negation cue found in the
        window decides; it is overridden when a reporting cue occurs after
        the cue's last occurrence ("... but patient reports experiencing X").
        """
        index = context.find(phrase)
        if index == -1:
            return False

        before = context[max(0, index - self.window):index]
        for cue in self.negation_cues:
            if cue not in before:
                continue
            cue_index = before.rfind(cue)
            if any(before.rfind(report) > cue_index for report in self.reporting_cues):
                return False
            return True
        return False


_DEFAULT_DETECTOR = NegationDetector()


def is_negated(context: str, phrase: str) -> bool:
    """Check *phrase* in *context* with the default 50-character window."""
    return _DEFAULT_DETECTOR.is_negated(context, phrase)
