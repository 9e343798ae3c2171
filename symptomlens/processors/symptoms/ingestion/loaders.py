"""
Load clinical notes and the symptom vocabulary from tabular or JSON files
into engine types.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, TypeVar, Union

import pandas as pd

from ..types import ClinicalNote, VocabularyEntry

logger = logging.getLogger(__name__)

_TABULAR_EXTENSIONS = {".csv", ".xlsx"}
_JSON_EXTENSIONS = {".json"}

T = TypeVar("T")


def read_records(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read a CSV/Excel sheet or a JSON array of objects into row dicts.

    Empty cells become ``None``.

    Raises:
        FileNotFoundError: if *path* does not exist.
        ValueError: on an unsupported extension or a JSON document that is
            not a list of objects.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix in _TABULAR_EXTENSIONS:
        return _read_tabular(path)
    if suffix in _JSON_EXTENSIONS:
        return _read_json(path)
    raise ValueError(
        f"Unsupported file format: {suffix!r}. "
        f"Supported: {sorted(_TABULAR_EXTENSIONS | _JSON_EXTENSIONS)}"
    )


def load_notes(path: Union[str, Path]) -> List[ClinicalNote]:
    """Load clinical notes; rows that cannot be converted are skipped."""
    return _convert(read_records(path), ClinicalNote.from_dict, "note", path)


def load_vocabulary(path: Union[str, Path]) -> List[VocabularyEntry]:
    """Load the reference symptom vocabulary; rows without id or phrase are skipped."""
    return _convert(read_records(path), VocabularyEntry.from_dict, "vocabulary", path)


# ------------------------------------------------------------------
# Readers
# ------------------------------------------------------------------


def _read_tabular(path: Path) -> List[Dict[str, Any]]:
    # Identifiers such as "R51.9" or "00123" must stay strings
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    else:
        df = pd.read_excel(path, dtype=str, keep_default_na=False)
    df.columns = [str(c).strip() for c in df.columns]
    return [
        {column: _clean_cell(value) for column, value in row.items()}
        for row in df.to_dict(orient="records")
    ]


def _clean_cell(value: Any) -> Any:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _read_json(path: Path) -> List[Dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        # {"notes": [...]} / {"vocabulary": [...]} style wrappers
        lists = [v for v in data.values() if isinstance(v, list)]
        if len(lists) != 1:
            raise ValueError(f"{path}: expected a JSON array of objects")
        data = lists[0]
    if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
        raise ValueError(f"{path}: expected a JSON array of objects")
    return data


def _convert(
    rows: List[Dict[str, Any]],
    factory: Callable[[Dict[str, Any]], T],
    kind: str,
    path: Union[str, Path],
) -> List[T]:
    items: List[T] = []
    skipped = 0
    for row in rows:
        try:
            items.append(factory(row))
        except (ValueError, TypeError) as exc:
            skipped += 1
            logger.debug("Skipping %s row in %s: %s", kind, path, exc)
    if skipped:
        logger.warning("Skipped %d malformed %s rows in %s", skipped, kind, path)
    logger.info("Loaded %d %s rows from %s", len(items), kind, path)
    return items
