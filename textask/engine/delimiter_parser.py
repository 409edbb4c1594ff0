"""Parser for structured "<type> - <time> - <text>" messages.

It must be deterministic: same input -> same output (or same structured error).
"""

from __future__ import annotations

from typing import Optional

from textask.models.constants import FIELD_DELIMITER, URL_SCHEME_MARKER
from textask.models.task import ParsedFields


class TaskInputError(ValueError):
    """User-input error; the sender has to fix the message and resend it."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def is_structured(text: str) -> bool:
    """Whether text should be parsed into type/time/text fields.

    Anything containing a URL is a simple message, even if it has a delimiter.
    """
    text = text or ""
    return FIELD_DELIMITER in text and URL_SCHEME_MARKER not in text


def parse(text: str) -> ParsedFields:
    """Split a structured message into its three fields.

    "Call - 15 mins - Dentist" -> task_type="Call", task_time="15 mins",
    task_text="Dentist". Segments past the third are joined back into the
    task text so hyphenated descriptions survive.

    Raises:
        TaskInputError: if the message has fewer than three segments.
    """
    segments = (text or "").split(FIELD_DELIMITER)
    if len(segments) < 3:
        raise TaskInputError(
            "Please use the format: type - time - task",
            field="task_text" if len(segments) == 2 else "task_time",
        )

    task_text = FIELD_DELIMITER.join(segments[2:]).strip()
    return ParsedFields(
        task_type=segments[0].strip(),
        task_time=segments[1].strip(),
        task_text=task_text,
    )
