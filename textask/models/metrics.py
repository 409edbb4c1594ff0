"""Per-request pipeline counters.

A fresh PipelineMetrics is created by the caller for each message and filled
in by the pipeline; nothing is shared between requests.
"""

from pydantic import BaseModel


class PipelineMetrics(BaseModel):
    """Counters describing how one message was interpreted."""
    structured: bool = False
    shortcut_applied: bool = False
    date_detected: bool = False
    oracle_calls: int = 0
    oracle_failures: int = 0
    category_fallback: bool = False
    duration_fallback: bool = False
