"""Tests for shortcut and due-date extraction."""

from datetime import datetime

from textask.engine.extractor import apply_shortcuts, extract_due_date, process, strip_date_phrase


class TestApplyShortcuts:
    """Test apply_shortcuts() function."""

    def test_urgent_shortcut_sets_today(self):
        text, status = apply_shortcuts("!urgent finish report")

        assert status == "⭐️ Today"
        assert text == "finish report"

    def test_trigger_anywhere_in_text(self):
        text, status = apply_shortcuts("finish report !week")

        assert status == "📅 This Week"
        assert text == "finish report"

    def test_trigger_is_case_insensitive(self):
        text, status = apply_shortcuts("!URGENT call bank")

        assert status == "⭐️ Today"
        assert text == "call bank"

    def test_last_rule_wins_with_several_triggers(self):
        """Rules are scanned in table order and each match overwrites the status."""
        text, status = apply_shortcuts("!week !urgent do taxes")

        assert status == "📅 This Week"
        assert text == "do taxes"

    def test_status_label_comes_from_vocabulary(self):
        _, status = apply_shortcuts("!week plan trip", {"this_week": "This Week"})

        assert status == "This Week"

    def test_trigger_must_end_at_word_boundary(self):
        text, status = apply_shortcuts("!weekend plans")

        assert status is None
        assert text == "!weekend plans"

    def test_no_trigger_leaves_status_unset(self):
        text, status = apply_shortcuts("finish report")

        assert status is None
        assert text == "finish report"


class TestExtractDueDate:
    """Test extract_due_date() function."""

    def test_tomorrow_is_due_at_five_pm(self, now):
        text, due_date = extract_due_date("pay rent tomorrow", now=now)

        assert due_date == "2026-10-20T17:00:00.000Z"
        assert text == "pay rent"

    def test_weekday_resolves_to_upcoming_day(self, now):
        text, due_date = extract_due_date("renew passport by friday", now=now)

        assert due_date == "2026-10-23T17:00:00.000Z"
        assert text == "renew passport"

    def test_local_five_pm_is_converted_to_utc(self, now):
        _, due_date = extract_due_date("pay rent tomorrow", now=now, timezone_name="America/New_York")

        assert due_date == "2026-10-20T21:00:00.000Z"

    def test_relative_hours_keep_computed_time(self):
        """A message sent after 17:00 must not get a due date in the past."""
        evening = datetime(2026, 10, 19, 18, 0)

        text, due_date = extract_due_date("pay rent in 2 hours", now=evening)

        assert due_date == "2026-10-19T20:00:00.000Z"
        assert text == "pay rent"

    def test_bare_month_abbreviation_is_not_a_date(self, now):
        text, due_date = extract_due_date("email Jan about report", now=now)

        assert due_date is None
        assert text == "email Jan about report"

    def test_no_date_leaves_text_unchanged(self, now):
        text, due_date = extract_due_date("finish report", now=now)

        assert due_date is None
        assert text == "finish report"

    def test_empty_text(self, now):
        assert extract_due_date("", now=now) == ("", None)


class TestStripDatePhrase:
    """Test strip_date_phrase() heuristic."""

    def test_removes_phrase_and_connector(self):
        assert strip_date_phrase("renew passport by friday", "friday") == "renew passport"

    def test_removes_phrase_including_connector(self):
        assert strip_date_phrase("renew passport by friday", "by friday") == "renew passport"

    def test_keeps_text_after_phrase(self):
        assert strip_date_phrase("on monday call the bank", "on monday") == "call the bank"

    def test_unlocated_phrase_strips_from_connector(self):
        """Fallback drops everything from the first connector word."""
        assert strip_date_phrase("meet Sam at noon", "12:00") == "meet Sam"

    def test_never_strips_everything(self):
        assert strip_date_phrase("tomorrow", "tomorrow") == "tomorrow"


class TestProcess:
    """Test process() function."""

    def test_urgent_shortcut(self, now):
        processed = process("!urgent finish report", now=now)

        assert processed.status == "⭐️ Today"
        assert processed.text == "finish report"
        assert processed.due_date is None

    def test_date_only(self, now):
        processed = process("pay rent tomorrow", now=now)

        assert processed.status is None
        assert processed.due_date == "2026-10-20T17:00:00.000Z"
        assert processed.text == "pay rent"

    def test_shortcut_and_date(self, now):
        processed = process("!week renew passport by friday", now=now)

        assert processed.status == "📅 This Week"
        assert processed.due_date == "2026-10-23T17:00:00.000Z"
        assert processed.text == "renew passport"

    def test_plain_text_is_returned_unchanged(self, now):
        processed = process("buy  milk", now=now)

        assert processed.text == "buy  milk"
        assert processed.status is None
        assert processed.due_date is None
