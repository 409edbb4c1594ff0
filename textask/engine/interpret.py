"""High-level interpretation of inbound messages.

This module is the single entrypoint used by the /sms webhook.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from textask.config import Settings
from textask.engine.assembler import assemble
from textask.engine.delimiter_parser import TaskInputError, is_structured, parse
from textask.engine.extractor import apply_shortcuts, extract_due_date, process
from textask.engine.inference import enrich, normalize_duration
from textask.engine.matcher import best_match
from textask.integrations.openai_client import OracleClient
from textask.models.metrics import PipelineMetrics
from textask.models.task import ProcessedTask, TaskRecord
from textask.models.vocabulary import Vocabularies, resolve_status_label

logger = logging.getLogger(__name__)

UNKNOWN_TASK_TYPE_MESSAGE = "Sorry, I don't know that task type. Please try again!"


def interpret(
    raw_text: str,
    vocabularies: Vocabularies,
    settings: Settings,
    *,
    oracle: Optional[OracleClient] = None,
    now: Optional[datetime] = None,
    metrics: Optional[PipelineMetrics] = None,
) -> TaskRecord:
    """Turn a raw message into a TaskRecord.

    Simple messages get shortcut/date extraction and AI enrichment. Structured
    messages ("type - time - text") additionally get a fuzzy-matched task type
    and use the sender's duration when it is valid.

    Args:
        raw_text: Unmodified message body
        vocabularies: Category, status and task-type vocabularies (may be empty)
        settings: Service settings (timezone, default statuses, oracle timeout)
        oracle: Completion oracle, or None to skip enrichment
        now: Naive local time relative dates resolve against (defaults to now)
        metrics: Per-request counters, filled in as the message is processed

    Raises:
        TaskInputError: empty message, fewer than three structured fields, or a
            task type that matches nothing in the vocabulary.
    """
    metrics = metrics if metrics is not None else PipelineMetrics()
    raw = (raw_text or "").strip()
    if not raw:
        raise TaskInputError("Message is empty", field="task_text")

    task_type: Optional[str] = None
    needs_triage: Optional[bool] = None
    duration: Optional[str] = None

    if is_structured(raw):
        metrics.structured = True
        stripped, status = apply_shortcuts(raw, vocabularies.statuses)
        fields = parse(stripped)

        task_type = best_match(vocabularies.task_types, fields.task_type)
        if task_type is None:
            logger.info(f"Task type '{fields.task_type}' not found in {len(vocabularies.task_types)} types")
            raise TaskInputError(UNKNOWN_TASK_TYPE_MESSAGE, field="task_type")

        text, due_date = extract_due_date(fields.task_text, now=now, timezone_name=settings.timezone)
        processed = ProcessedTask(text=text, status=status, due_date=due_date)
        duration = normalize_duration(fields.task_time)
        needs_triage = True
        default_status_key = settings.structured_default_status
    else:
        processed = process(
            raw,
            now=now,
            statuses=vocabularies.statuses,
            timezone_name=settings.timezone,
        )
        default_status_key = settings.simple_default_status

    if not processed.text:
        raise TaskInputError("Task text is empty", field="task_text")

    metrics.shortcut_applied = processed.status is not None
    metrics.date_detected = processed.due_date is not None

    category, estimated = enrich(
        processed.text,
        vocabularies.categories,
        oracle,
        timeout_sec=settings.oracle_timeout_sec,
        estimate=duration is None,
        metrics=metrics,
    )

    record = assemble(
        processed,
        category,
        duration or estimated,
        resolve_status_label(default_status_key, vocabularies.statuses),
        task_type=task_type,
        needs_triage=needs_triage,
    )
    logger.debug(f"Interpreted message into record with status '{record.status}'")
    return record
