"""Human-readable extraction reports and summary statistics."""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List

import numpy as np

from .types import UNKNOWN_KEY, ExtractionResult, MatchRecord

_PREVIEW = 3


def _preview(values: List[str]) -> str:
    """First three values, then "and N more"."""
    text = ", ".join(values[:_PREVIEW])
    if len(values) > _PREVIEW:
        text += f" and {len(values) - _PREVIEW} more"
    return text


def _unique(values) -> List[str]:
    return list(dict.fromkeys(str(v) for v in values))


def _mean_confidence(matches: List[MatchRecord]) -> float:
    return float(np.mean([m.confidence for m in matches]))


def generate_extraction_report(result: ExtractionResult) -> str:
    """Markdown report; group breakdowns only when the organized index is present."""
    lines = [
        f"# Symptom Extraction Report ({result.version})",
        "",
        f"Total symptoms extracted: {result.total_extracted}",
        "",
    ]
    if result.failures:
        lines.append(f"Notes failed: {len(result.failures)}")
        lines.append("")

    index = result.organized_index
    if index is None:
        return "\n".join(lines)

    lines += ["## Symptoms by Segment", ""]
    for segment, matches in index.by_symptom_segment.items():
        lines.append(f'- "{segment}" ({len(matches)} matches)')
        if matches:
            lines.append(f"  - Match types: {', '.join(_unique(m.match_type for m in matches))}")
            lines.append(f"  - Confidence: {_mean_confidence(matches):.2f}")

    lines += ["", "## Symptoms by Diagnosis", ""]
    for diagnosis, matches in index.by_diagnosis.items():
        lines.append(f"- {diagnosis}: {len(matches)} matches")
        if matches:
            lines.append(f"  - Symptoms: {_preview(_unique(m.phrase for m in matches))}")

    lines += ["", "## Symptoms by Diagnostic Category", ""]
    for category, matches in index.by_category.items():
        lines.append(f"- {category}: {len(matches)} matches")
        if matches:
            diagnoses = _unique(m.diagnosis or UNKNOWN_KEY for m in matches)
            lines.append(f"  - Diagnoses: {_preview(diagnoses)}")

    return "\n".join(lines) + "\n"


def summary_statistics(result: ExtractionResult) -> Dict[str, Any]:
    """Return summary statistics for an extraction result."""
    confidences = np.array([m.confidence for m in result.matches], dtype=float)
    stats: Dict[str, Any] = {
        "version": result.version,
        "total_extracted": result.total_extracted,
        "notes_processed": result.notes_processed,
        "notes_skipped": result.notes_skipped,
        "notes_failed": len(result.failures),
        "patients": len({m.patient_id for m in result.matches}),
        "notes_with_matches": len({(m.patient_id, m.note_id) for m in result.matches}),
        "match_types": dict(Counter(m.match_type for m in result.matches)),
        "section_types": dict(Counter(m.section_type for m in result.matches)),
    }
    if confidences.size:
        stats["confidence"] = {
            "mean": float(confidences.mean()),
            "min": float(confidences.min()),
            "max": float(confidences.max()),
        }
    else:
        stats["confidence"] = None
    return stats
