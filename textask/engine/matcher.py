"""Fuzzy matching of free text against a vocabulary (task types, categories)."""

import logging
from difflib import SequenceMatcher
from typing import Optional, Sequence

from textask.models.constants import MATCH_THRESHOLD

logger = logging.getLogger(__name__)


def match_score(candidate: str, query: str) -> float:
    """Distance between candidate and query: 0.0 is identical, 1.0 shares nothing."""
    ratio = SequenceMatcher(None, query.casefold(), candidate.casefold()).ratio()
    return 1.0 - ratio


def best_match(
    candidates: Sequence[str],
    query: str,
    *,
    threshold: float = MATCH_THRESHOLD,
) -> Optional[str]:
    """Return the candidate closest to query.

    The lowest score wins; ties keep the first candidate seen. A poor match is
    still returned as long as it is within the matcher's threshold.

    Args:
        candidates: Vocabulary to search
        query: Free-text token, e.g. the type segment of a structured message
        threshold: Highest usable score

    Returns:
        The best candidate, or None if the vocabulary is empty, the query is
        blank, or nothing scores within the threshold.
    """
    query = (query or "").strip()
    if not candidates or not query:
        return None

    best: Optional[str] = None
    best_score = threshold
    for candidate in candidates:
        if not candidate:
            continue
        score = match_score(candidate, query)
        if best is None and score <= best_score:
            best, best_score = candidate, score
        elif score < best_score:
            best, best_score = candidate, score

    if best is None:
        logger.debug(f"No vocabulary entry close enough to '{query}'")
    return best
