"""Assembly of the final task record."""

from typing import Optional

from textask.models.task import ProcessedTask, TaskRecord
from textask.models.vocabulary import CategoryCandidate


def assemble(
    processed: ProcessedTask,
    category: CategoryCandidate,
    duration: str,
    default_status: str,
    *,
    task_type: Optional[str] = None,
    needs_triage: Optional[bool] = None,
) -> TaskRecord:
    """Merge extraction and enrichment results into one TaskRecord.

    Task name, status, category and duration are always set. A shortcut status
    takes precedence over default_status. Task type, triage flag and due date
    are only set when known.
    """
    return TaskRecord(
        task_name=processed.text,
        status=processed.status or default_status,
        category_id=category.id,
        duration=duration,
        task_type=task_type,
        needs_triage=needs_triage,
        due_date=processed.due_date,
    )
