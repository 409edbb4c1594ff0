"""Data models for textask."""

from textask.models.task import ParsedFields, ProcessedTask, TaskRecord
from textask.models.vocabulary import CategoryCandidate, Vocabularies, FALLBACK_CATEGORY
from textask.models.metrics import PipelineMetrics
from textask.models.constants import ShortcutRule

__all__ = [
    "ParsedFields",
    "ProcessedTask",
    "TaskRecord",
    "CategoryCandidate",
    "Vocabularies",
    "FALLBACK_CATEGORY",
    "PipelineMetrics",
    "ShortcutRule",
]
