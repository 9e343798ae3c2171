"""
Persistence seam: batched hand-off of match rows to a storage collaborator.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Protocol, Union, runtime_checkable

from .types import ExtractionResult

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100


@runtime_checkable
class ResultSink(Protocol):
    """Anything that can store a batch of match rows."""

    def save_matches(self, rows: List[Dict[str, Any]]) -> None:
        ...


class InMemorySink:
    """Collects rows in a list; useful for tests and previews."""

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.batches = 0

    def save_matches(self, rows: List[Dict[str, Any]]) -> None:
        self.rows.extend(rows)
        self.batches += 1


class JSONLinesSink:
    """Appends one JSON object per row to a file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def save_matches(self, rows: List[Dict[str, Any]]) -> None:
        with self.path.open("a", encoding="utf-8") as fh:
            for row in rows:
                fh.write(json.dumps(row, default=str) + "\n")


def save_extraction_results(
    result: ExtractionResult,
    sink: ResultSink,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Dict[str, Any]:
    """Write *result*'s matches to *sink* in batches of *batch_size*.

    Sink errors are logged and reported in the returned status rather than
    raised; rows already written stay written.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    rows = [match.to_dict() for match in result.matches]
    saved = 0
    try:
        for i in range(0, len(rows), batch_size):
            batch = rows[i:i + batch_size]
            sink.save_matches(batch)
            saved += len(batch)
    except Exception as exc:
        logger.error("Error saving extraction results after %d rows: %s", saved, exc)
        return {
            "success": False,
            "error": str(exc) or "Unknown error saving results",
            "saved_count": saved,
            "total_count": len(rows),
        }

    logger.info("Saved %d extracted symptoms", saved)
    return {"success": True, "saved_count": saved, "total_count": len(rows)}
