"""Constants for textask.

This module centralizes the shortcut table, default labels and duration limits
used throughout the application.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ShortcutRule:
    """A literal trigger in the message body that overrides the task status."""
    trigger: str
    status_key: str


# Scanned in this order; when several triggers are present the last one wins.
SHORTCUT_RULES = (
    ShortcutRule(trigger="!urgent", status_key="today"),
    ShortcutRule(trigger="!later", status_key="later"),
    ShortcutRule(trigger="!week", status_key="this_week"),
    ShortcutRule(trigger="!waiting", status_key="waiting"),
)

# Used when the status table is unavailable or lacks a key
DEFAULT_STATUS_LABELS = {
    "today": "⭐️ Today",
    "this_week": "📅 This Week",
    "later": "🔜 Later",
    "waiting": "⏳ Waiting",
    "backlog": "📥 Backlog",
}

# Structured messages: "<type> - <time> - <text>"
FIELD_DELIMITER = "-"
URL_SCHEME_MARKER = "://"

# Date extraction
DEFAULT_DUE_HOUR = 17
TEMPORAL_CONNECTORS = ("today", "tomorrow", "next", "this", "in", "on", "at", "by")

# Fuzzy matching (same default cut-off as Fuse.js)
MATCH_THRESHOLD = 0.6

# Duration estimation
DEFAULT_DURATION = "15 mins"
MAX_DURATION_LABEL = "2 hr"
MAX_DURATION_MIN = 120
DURATION_OPTIONS = (
    "15 mins",
    "30 mins",
    "45 mins",
    "1 hr",
    "1 hr 15 mins",
    "1 hr 30 mins",
    "1 hr 45 mins",
    "2 hr",
)

# Category resolution
UNCATEGORIZED_MARKER = "uncategorized"
