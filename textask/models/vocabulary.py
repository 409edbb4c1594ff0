"""Vocabulary models: the category, status and task-type lists read from Coda."""

import re
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from textask.models.constants import DEFAULT_STATUS_LABELS

_NON_WORD_RE = re.compile(r"[^a-z0-9\s]")


class CategoryCandidate(BaseModel):
    """A row of the category table."""
    name: str = Field(..., description="Display name, may include an emoji")
    id: str = Field(..., description="Coda row id, or 'fallback' for the sentinel")

    class Config:
        frozen = True


# Returned when no real category can be resolved
FALLBACK_CATEGORY = CategoryCandidate(name="Uncategorized", id="fallback")


class Vocabularies(BaseModel):
    """Request-time vocabularies. Any of them may be empty."""
    categories: List[CategoryCandidate] = Field(default_factory=list)
    statuses: Dict[str, str] = Field(
        default_factory=dict,
        description="Normalized status key -> display label",
    )
    task_types: List[str] = Field(default_factory=list)


def normalize_status_key(label: str) -> str:
    """Normalize a status label to a lookup key ("📅 This Week" -> "this_week")."""
    cleaned = _NON_WORD_RE.sub("", (label or "").lower())
    return "_".join(cleaned.split())


def resolve_status_label(key: str, statuses: Optional[Dict[str, str]] = None) -> str:
    """Map a status key to the label used in the task table."""
    if statuses and key in statuses:
        return statuses[key]
    return DEFAULT_STATUS_LABELS.get(key, key)
