"""
Matcher registry: resolves an algorithm version to a matching strategy.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .base import SymptomMatcher

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "v3.2"

# Registry of version → implementing class
_MATCHER_REGISTRY = {
    "v3.2": ".context_aware:ContextAwareMatcher",
    "v3.0": ".legacy:LegacySubstringMatcher",
}


def create_matcher(version: str = DEFAULT_VERSION, config: Optional[Dict[str, Any]] = None) -> SymptomMatcher:
    """Instantiate the matcher registered for *version*."""
    config = config or {}
    logger.debug("Creating matcher for version %s", version)
    if version == "v3.2":
        from ..context.negation import NEGATION_WINDOW, NegationDetector
        from .context_aware import ContextAwareMatcher

        window = config.get("negation", {}).get("window", NEGATION_WINDOW)
        return ContextAwareMatcher(negation_detector=NegationDetector(window=window))
    elif version == "v3.0":
        from .legacy import LegacySubstringMatcher

        return LegacySubstringMatcher()
    else:
        raise ValueError(
            f"Unknown matcher version: {version!r}. "
            f"Available: {list(_MATCHER_REGISTRY)}"
        )


def available_versions() -> List[Dict[str, Any]]:
    """Version metadata of every registered matcher, newest first."""
    infos = []
    for version in sorted(_MATCHER_REGISTRY, reverse=True):
        infos.append(dict(create_matcher(version).version_info))
    return infos
