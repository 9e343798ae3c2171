"""Text helpers shared by the pipeline stages."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, List, Optional

import dateutil.parser

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lower-case *text* and collapse every whitespace run to one space.

    Idempotent: ``normalize_text(normalize_text(s)) == normalize_text(s)``.
    """
    text = text.lower().replace("\r\n", "\n").replace("\t", " ")
    return _WHITESPACE_RUN.sub(" ", text).strip()


def find_all(text: str, needle: str) -> List[int]:
    """Start index of every (possibly overlapping) occurrence of *needle*."""
    positions: List[int] = []
    if not needle:
        return positions
    idx = text.find(needle)
    while idx != -1:
        positions.append(idx)
        idx = text.find(needle, idx + 1)
    return positions


def parse_service_date(value: Any) -> Optional[date]:
    """Coerce a feed value (string, datetime, date) into a ``date``.

    Unparseable strings and empty values return ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return dateutil.parser.parse(text).date()
    except (ValueError, OverflowError):
        return None
