"""Side-by-side runs of several matcher versions over the same batch."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, Iterable, Optional, Sequence

from .processor import SymptomExtractor, _require_collection

logger = logging.getLogger(__name__)


def compare_strategies(
    notes: Iterable[Any],
    vocabulary: Iterable[Any],
    versions: Sequence[str] = ("v3.0", "v3.2"),
    options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Run each version in *versions* and summarize how their output differs.

    Returns per-version totals, per-note match counts, match-type counts and
    the vocabulary ids each version found that no other version did.
    """
    notes = _require_collection(notes, "notes")
    vocabulary = _require_collection(vocabulary, "vocabulary")

    per_version: Dict[str, Dict[str, Any]] = {}
    found_ids: Dict[str, set] = {}
    for version in versions:
        result = SymptomExtractor({"version": version}).extract(notes, vocabulary, options)
        per_note = Counter(f"{m.patient_id}:{m.note_id}" for m in result.matches)
        found_ids[version] = {m.vocabulary_id for m in result.matches}
        per_version[version] = {
            "total_extracted": result.total_extracted,
            "distinct_vocabulary_ids": len(found_ids[version]),
            "per_note": dict(per_note),
            "match_types": dict(Counter(m.match_type for m in result.matches)),
            "failures": len(result.failures),
        }
        logger.info("Version %s extracted %d matches", version, result.total_extracted)

    for version in versions:
        others = set().union(*(ids for v, ids in found_ids.items() if v != version))
        per_version[version]["only_in_version"] = sorted(found_ids[version] - others)

    return {"versions": list(versions), "results": per_version}
