"""AI enrichment of task attributes.

This module asks the oracle for a category and a duration estimate. Oracle
replies are untrusted free text:

1. Category replies must exactly match a vocabulary name, otherwise the
   vocabulary's own "uncategorized" row (or the fallback sentinel) is used
2. Duration replies must match "<N> mins", "<N> hr" or "<N> hr <M> mins" and
   are capped at 2 hours, otherwise "15 mins" is used
3. Enrichment never raises; a failure only ever downgrades to defaults
"""

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Optional, Sequence, Tuple

from textask.integrations.openai_client import OracleClient, OracleFailure, OracleSuccess
from textask.models.constants import (
    DEFAULT_DURATION,
    DURATION_OPTIONS,
    MAX_DURATION_LABEL,
    MAX_DURATION_MIN,
    UNCATEGORIZED_MARKER,
)
from textask.models.metrics import PipelineMetrics
from textask.models.vocabulary import CategoryCandidate, FALLBACK_CATEGORY

logger = logging.getLogger(__name__)

CATEGORY_PROMPT_TEMPLATE = """Pick the category that best fits this task.

Task: "{description}"

Categories:
{options}

Reply with exactly one category name from the list, copied character for character (including any emoji). No other text."""

DURATION_PROMPT_TEMPLATE = """Estimate how long this task will take.

Task: "{description}"

Reply with exactly one of: {options}. No other text."""

_DURATION_RE = re.compile(
    r"^(?:(?P<hours>\d+)\s+hr(?:\s+(?P<hr_mins>\d+)\s+mins)?|(?P<mins>\d+)\s+mins)$"
)


def _clean_reply(text: str) -> str:
    """Trim whitespace, wrapping quotes and a trailing period."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        text = text[1:-1]
    return text.strip().rstrip(".").strip()


def uncategorized_candidate(candidates: Sequence[CategoryCandidate]) -> CategoryCandidate:
    """The vocabulary's own "uncategorized" row, else the fallback sentinel."""
    for candidate in candidates:
        if UNCATEGORIZED_MARKER in candidate.name.lower():
            return candidate
    return FALLBACK_CATEGORY


def classify_category(
    description: str,
    candidates: Sequence[CategoryCandidate],
    oracle: Optional[OracleClient],
    metrics: Optional[PipelineMetrics] = None,
) -> CategoryCandidate:
    """Resolve a category for the task description.

    Args:
        description: Visible task text
        candidates: Category vocabulary
        oracle: Completion oracle (None when enrichment is disabled)
        metrics: Optional per-request counters to update

    Returns:
        The candidate whose name equals the oracle reply; otherwise the
        vocabulary's "uncategorized" row or FALLBACK_CATEGORY. An empty
        vocabulary short-circuits to FALLBACK_CATEGORY without calling the oracle.
    """
    metrics = metrics if metrics is not None else PipelineMetrics()

    if not candidates:
        logger.debug("Category vocabulary is empty. Using fallback category.")
        metrics.category_fallback = True
        return FALLBACK_CATEGORY

    if oracle is None:
        metrics.category_fallback = True
        return uncategorized_candidate(candidates)

    options = "\n".join(f"- {c.name}" for c in candidates)
    prompt = CATEGORY_PROMPT_TEMPLATE.format(description=description, options=options)

    metrics.oracle_calls += 1
    try:
        result = oracle.complete(prompt, max_tokens=30, temperature=0.0)
    except Exception as e:
        logger.error(f"Error classifying task: {type(e).__name__}")
        result = OracleFailure(type(e).__name__)

    if isinstance(result, OracleSuccess):
        reply = _clean_reply(result.text)
        for candidate in candidates:
            if candidate.name == reply:
                logger.debug(f"Oracle picked category '{candidate.name}'")
                return candidate
        logger.info(f"Oracle category '{reply[:50]}' is not in the vocabulary. Using uncategorized.")
    else:
        metrics.oracle_failures += 1
        logger.info(f"Category enrichment unavailable ({result.reason}). Using uncategorized.")

    metrics.category_fallback = True
    return uncategorized_candidate(candidates)


def duration_minutes(value: str) -> Optional[int]:
    """Total minutes of a "<N> mins" / "<N> hr" / "<N> hr <M> mins" string, or None."""
    m = _DURATION_RE.match((value or "").strip())
    if not m:
        return None
    if m.group("mins") is not None:
        return int(m.group("mins"))
    return int(m.group("hours")) * 60 + int(m.group("hr_mins") or 0)


def normalize_duration(value: str) -> Optional[str]:
    """Validate a duration string and cap it at MAX_DURATION_LABEL.

    Returns None when the value is not a usable duration.
    """
    cleaned = _clean_reply(value or "")
    total = duration_minutes(cleaned)
    if total is None or total <= 0:
        return None
    if total > MAX_DURATION_MIN:
        logger.debug(f"Duration '{cleaned}' above maximum. Using {MAX_DURATION_LABEL}.")
        return MAX_DURATION_LABEL
    return cleaned


def estimate_duration(
    description: str,
    oracle: Optional[OracleClient],
    metrics: Optional[PipelineMetrics] = None,
) -> str:
    """Estimate how long the task takes, as a duration label.

    Returns DEFAULT_DURATION when the oracle is unavailable, fails, or replies
    with anything outside the accepted formats.
    """
    metrics = metrics if metrics is not None else PipelineMetrics()

    if oracle is None:
        metrics.duration_fallback = True
        return DEFAULT_DURATION

    prompt = DURATION_PROMPT_TEMPLATE.format(
        description=description,
        options=", ".join(f'"{o}"' for o in DURATION_OPTIONS),
    )

    metrics.oracle_calls += 1
    try:
        result = oracle.complete(prompt, max_tokens=10, temperature=0.0)
    except Exception as e:
        logger.error(f"Error estimating duration: {type(e).__name__}")
        result = OracleFailure(type(e).__name__)

    if isinstance(result, OracleFailure):
        metrics.oracle_failures += 1
        metrics.duration_fallback = True
        logger.info(f"Duration enrichment unavailable ({result.reason}). Using {DEFAULT_DURATION}.")
        return DEFAULT_DURATION

    duration = normalize_duration(result.text)
    if duration is None:
        metrics.duration_fallback = True
        logger.info(f"Invalid duration '{result.text[:30]}' from oracle. Using {DEFAULT_DURATION}.")
        return DEFAULT_DURATION
    return duration


def _merge_metrics(target: PipelineMetrics, source: PipelineMetrics) -> None:
    target.oracle_calls += source.oracle_calls
    target.oracle_failures += source.oracle_failures
    target.category_fallback = target.category_fallback or source.category_fallback
    target.duration_fallback = target.duration_fallback or source.duration_fallback


def enrich(
    description: str,
    candidates: Sequence[CategoryCandidate],
    oracle: Optional[OracleClient],
    *,
    timeout_sec: float,
    estimate: bool = True,
    metrics: Optional[PipelineMetrics] = None,
) -> Tuple[CategoryCandidate, Optional[str]]:
    """Run category and duration enrichment concurrently.

    Both calls share one deadline; a call still running at the deadline is
    abandoned and treated as an oracle failure.

    Args:
        description: Visible task text
        candidates: Category vocabulary
        oracle: Completion oracle (None when enrichment is disabled)
        timeout_sec: Bounded wait for both calls
        estimate: Whether to ask for a duration at all
        metrics: Optional per-request counters to update

    Returns:
        Tuple of (category, duration label or None when estimate=False)
    """
    metrics = metrics if metrics is not None else PipelineMetrics()
    category_metrics = PipelineMetrics()
    duration_metrics = PipelineMetrics()

    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="enrich")
    try:
        category_future = executor.submit(
            classify_category, description, candidates, oracle, category_metrics
        )
        duration_future = (
            executor.submit(estimate_duration, description, oracle, duration_metrics)
            if estimate
            else None
        )

        deadline = time.monotonic() + timeout_sec

        try:
            category = category_future.result(timeout=max(0.0, deadline - time.monotonic()))
        except FutureTimeoutError:
            logger.warning(f"Category enrichment exceeded {timeout_sec}s. Using uncategorized.")
            category = uncategorized_candidate(candidates)
            category_metrics = PipelineMetrics(
                oracle_calls=1, oracle_failures=1, category_fallback=True
            )

        duration: Optional[str] = None
        if duration_future is not None:
            try:
                duration = duration_future.result(timeout=max(0.0, deadline - time.monotonic()))
            except FutureTimeoutError:
                logger.warning(f"Duration enrichment exceeded {timeout_sec}s. Using {DEFAULT_DURATION}.")
                duration = DEFAULT_DURATION
                duration_metrics = PipelineMetrics(
                    oracle_calls=1, oracle_failures=1, duration_fallback=True
                )
    finally:
        # Don't wait for abandoned calls
        executor.shutdown(wait=False, cancel_futures=True)

    _merge_metrics(metrics, category_metrics)
    _merge_metrics(metrics, duration_metrics)
    return category, duration
