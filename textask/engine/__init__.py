"""Message interpretation engine for textask."""

from textask.engine.delimiter_parser import TaskInputError, is_structured, parse
from textask.engine.extractor import process, apply_shortcuts, extract_due_date
from textask.engine.matcher import best_match
from textask.engine.inference import classify_category, estimate_duration, enrich
from textask.engine.assembler import assemble
from textask.engine.interpret import interpret

__all__ = [
    "TaskInputError",
    "is_structured",
    "parse",
    "process",
    "apply_shortcuts",
    "extract_due_date",
    "best_match",
    "classify_category",
    "estimate_duration",
    "enrich",
    "assemble",
    "interpret",
]
