"""Task data models for textask."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from textask.config import ColumnIds


class ParsedFields(BaseModel):
    """Fields of a structured "<type> - <time> - <text>" message."""
    task_type: str
    task_time: str
    task_text: str


class ProcessedTask(BaseModel):
    """Message text after shortcut and date extraction."""
    text: str = Field(..., description="Visible task text with triggers and date phrase removed")
    status: Optional[str] = Field(None, description="Status label set by a shortcut")
    due_date: Optional[str] = Field(None, description="ISO-8601 UTC instant of the detected due date")


class TaskRecord(BaseModel):
    """Task row handed to the table store.

    Field order is fixed: required fields first, then the optional ones.
    """
    task_name: str
    status: str
    category_id: str
    duration: str
    task_type: Optional[str] = None
    needs_triage: Optional[bool] = None
    due_date: Optional[str] = None

    def to_cells(self, columns: ColumnIds) -> List[Dict[str, Any]]:
        """Render the record as Coda cells, skipping unset optional fields."""
        cells = [
            {"column": columns.task_name, "value": self.task_name},
            {"column": columns.status, "value": self.status},
            {"column": columns.category, "value": self.category_id},
            {"column": columns.duration, "value": self.duration},
        ]
        if self.task_type is not None:
            cells.append({"column": columns.task_type, "value": self.task_type})
        if self.needs_triage is not None:
            cells.append({"column": columns.needs_triage, "value": self.needs_triage})
        if self.due_date is not None:
            cells.append({"column": columns.due_date, "value": self.due_date})
        return cells
