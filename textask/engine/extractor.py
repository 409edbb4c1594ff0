"""Shortcut and due-date extraction from raw message text.

Shortcuts are literal triggers (e.g. "!urgent") that override the task status.
Dates are found with dateparser's natural-language search. Both are removed
from the visible task text.

Date-phrase removal is a best-effort heuristic: the matched phrase plus a
dangling connector word ("by", "on", ...) right before it are dropped. When the
phrase cannot be located in the text, everything from the last connector word
onwards is dropped, which can remove unrelated trailing text.

Detection itself can misfire on words that double as dates. A month
abbreviation with no day ("email Jan about report") is ignored, but weekday
names used as nouns are not: "reply to Sunday school email" is due on Sunday
and loses the word "Sunday". Relative phrases ("in 2 hours", "now") keep the
clock time dateparser computed; any other phrase without a clock time is due
at 17:00.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple
from zoneinfo import ZoneInfo

from dateparser.search import search_dates

from textask.models.constants import (
    DEFAULT_DUE_HOUR,
    SHORTCUT_RULES,
    TEMPORAL_CONNECTORS,
)
from textask.models.task import ProcessedTask
from textask.models.vocabulary import resolve_status_label

logger = logging.getLogger(__name__)

_CONNECTORS = "|".join(TEMPORAL_CONNECTORS)
_DANGLING_CONNECTOR_RE = re.compile(rf"(?:\s+|^)(?:{_CONNECTORS})\s*$", re.I)
_TRAILING_DATE_PHRASE_RE = re.compile(rf"\s*\b(?:{_CONNECTORS})\b.*$", re.I)
_EXPLICIT_TIME_RE = re.compile(
    r"\b\d{1,2}(?::\d{2})?\s*(?:am|pm|a\.m\.|p\.m\.)|\b\d{1,2}:\d{2}\b|\bnoon\b|\bmidnight\b"
    r"|\b(?:in\s+)?\d+\s*(?:hours?|hrs?|minutes?|mins?)\b|\bnow\b",
    re.I,
)

_DATEPARSER_LANGUAGES = ["en"]

# "email Jan about report": a month abbreviation with no day is a name, not a date
_MONTH_ABBREVIATIONS = frozenset(
    ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "sept", "oct", "nov", "dec")
)


def _collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def apply_shortcuts(text: str, statuses: Optional[Dict[str, str]] = None) -> Tuple[str, Optional[str]]:
    """Strip shortcut triggers from text and return (text, status label).

    Every rule is checked; each match overwrites the status, so with several
    triggers in one message the last rule in SHORTCUT_RULES wins.
    """
    status: Optional[str] = None
    matched = []
    for rule in SHORTCUT_RULES:
        pattern = re.compile(re.escape(rule.trigger) + r"\b", re.I)
        if pattern.search(text):
            status = resolve_status_label(rule.status_key, statuses)
            text = pattern.sub(" ", text)
            matched.append(rule.trigger)

    if len(matched) > 1:
        logger.warning(f"Several shortcuts in one message {matched}; using '{matched[-1]}'")
    return _collapse_whitespace(text), status


def _has_explicit_time(phrase: str) -> bool:
    return bool(_EXPLICIT_TIME_RE.search(phrase))


def _is_bare_month_abbreviation(phrase: str) -> bool:
    words = phrase.lower().split()
    if not words or any(ch.isdigit() for ch in phrase):
        return False
    return words[0].strip(".,") in _MONTH_ABBREVIATIONS


def _to_utc_iso(local_dt: datetime, timezone_name: str) -> str:
    aware = local_dt.replace(tzinfo=ZoneInfo(timezone_name))
    return aware.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def strip_date_phrase(text: str, phrase: str) -> str:
    """Remove a detected date phrase and its connector word from text (best effort)."""
    idx = text.lower().rfind(phrase.lower())
    if idx < 0:
        stripped = _TRAILING_DATE_PHRASE_RE.sub("", text)
    else:
        head = _DANGLING_CONNECTOR_RE.sub("", text[:idx].rstrip())
        stripped = f"{head} {text[idx + len(phrase):]}"
    stripped = _collapse_whitespace(stripped)
    # Never strip the whole task away
    return stripped or _collapse_whitespace(text)


def extract_due_date(
    text: str,
    *,
    now: Optional[datetime] = None,
    timezone_name: str = "UTC",
) -> Tuple[str, Optional[str]]:
    """Find a natural-language date in text.

    Args:
        text: Task text (shortcuts already removed)
        now: Naive local "current time" that relative phrases resolve against
        timezone_name: IANA zone the phrase is interpreted in

    Returns:
        Tuple of (text without the date phrase, ISO-8601 UTC instant or None).
        Dates without an explicit clock time are due at 17:00 local.
    """
    if not text or not text.strip():
        return text, None

    if now is None:
        now = datetime.now(ZoneInfo(timezone_name)).replace(tzinfo=None)

    settings = {
        "RELATIVE_BASE": now,
        "TIMEZONE": timezone_name,
        "PREFER_DATES_FROM": "future",
        "RETURN_AS_TIMEZONE_AWARE": False,
    }
    try:
        matches = search_dates(text, languages=_DATEPARSER_LANGUAGES, settings=settings)
    except Exception as e:
        logger.warning(f"Date search failed: {type(e).__name__}")
        matches = None

    matches = [m for m in matches or [] if not _is_bare_month_abbreviation(m[0])]
    if not matches:
        return text, None

    phrase, found = matches[0]
    if found.tzinfo is not None:
        found = found.astimezone(ZoneInfo(timezone_name)).replace(tzinfo=None)
    if not _has_explicit_time(phrase):
        found = found.replace(hour=DEFAULT_DUE_HOUR, minute=0, second=0, microsecond=0)

    due_date = _to_utc_iso(found, timezone_name)
    logger.debug(f"Detected date phrase '{phrase}' -> {due_date}")
    return strip_date_phrase(text, phrase), due_date


def process(
    text: str,
    *,
    now: Optional[datetime] = None,
    statuses: Optional[Dict[str, str]] = None,
    timezone_name: str = "UTC",
) -> ProcessedTask:
    """Run shortcut and date extraction over a raw message.

    Absence of a shortcut or a date is the normal path, not an error.
    """
    raw = text or ""
    stripped, status = apply_shortcuts(raw, statuses)
    visible, due_date = extract_due_date(stripped, now=now, timezone_name=timezone_name)

    if status is None and due_date is None:
        return ProcessedTask(text=raw, status=None, due_date=None)
    return ProcessedTask(text=visible, status=status, due_date=due_date)
