"""End-to-end tests for interpret(), with the oracle mocked."""

import pytest
from unittest.mock import MagicMock

from textask.engine.delimiter_parser import TaskInputError
from textask.engine.interpret import interpret
from textask.integrations.openai_client import OracleClient, OracleSuccess
from textask.models.metrics import PipelineMetrics


def _routing_oracle(category_reply, duration_reply):
    oracle = MagicMock(spec=OracleClient)
    oracle.complete.side_effect = lambda prompt, max_tokens, temperature: OracleSuccess(
        category_reply if "Categories:" in prompt else duration_reply
    )
    return oracle


class TestSimpleMessages:
    """Messages without the field delimiter."""

    def test_shortcut_and_date_with_everything_unavailable(self, settings, empty_vocabularies, unreachable_oracle, now):
        """Empty vocabulary and an unreachable oracle still produce a full task."""
        metrics = PipelineMetrics()

        record = interpret(
            "!week renew passport by friday",
            empty_vocabularies,
            settings,
            oracle=unreachable_oracle,
            now=now,
            metrics=metrics,
        )

        assert record.status == "📅 This Week"
        assert record.category_id == "fallback"
        assert record.duration == "15 mins"
        assert record.due_date == "2026-10-23T17:00:00.000Z"
        assert record.task_name == "renew passport"
        assert metrics.shortcut_applied is True
        assert metrics.date_detected is True
        assert metrics.category_fallback is True
        assert metrics.duration_fallback is True
        # Empty category vocabulary never reaches the oracle
        assert metrics.oracle_calls == 1

    def test_default_status_comes_from_vocabulary(self, settings, vocabularies, now):
        oracle = _routing_oracle("🏠 Home", "30 mins")

        record = interpret("buy milk", vocabularies, settings, oracle=oracle, now=now)

        assert record.task_name == "buy milk"
        assert record.status == "⭐️ Today"
        assert record.category_id == "i-home"
        assert record.duration == "30 mins"
        assert record.task_type is None
        assert record.needs_triage is None

    def test_oracle_duration_is_clamped(self, settings, vocabularies, now):
        oracle = _routing_oracle("🏠 Home", "3 hr")

        record = interpret("paint fence", vocabularies, settings, oracle=oracle, now=now)

        assert record.duration == "2 hr"

    def test_url_with_hyphens_is_simple(self, settings, vocabularies, unreachable_oracle, now):
        metrics = PipelineMetrics()

        record = interpret(
            "https://example.com/some-long-article",
            vocabularies,
            settings,
            oracle=unreachable_oracle,
            now=now,
            metrics=metrics,
        )

        assert metrics.structured is False
        assert record.task_type is None

    def test_without_oracle(self, settings, vocabularies, now):
        record = interpret("buy milk", vocabularies, settings, oracle=None, now=now)

        assert record.category_id == "i-uncat"
        assert record.duration == "15 mins"

    def test_empty_message_is_rejected(self, settings, vocabularies):
        with pytest.raises(TaskInputError):
            interpret("   ", vocabularies, settings)

    def test_shortcut_only_message_is_rejected(self, settings, vocabularies, now):
        with pytest.raises(TaskInputError):
            interpret("!urgent", vocabularies, settings, now=now)


class TestStructuredMessages:
    """Messages in the "type - time - text" format."""

    def test_structured_message(self, settings, vocabularies, now):
        oracle = _routing_oracle("💼 Work", "1 hr")
        metrics = PipelineMetrics()

        record = interpret("Call - 15 mins - Dentist", vocabularies, settings, oracle=oracle, now=now, metrics=metrics)

        assert record.task_name == "Dentist"
        assert record.task_type == "Call"
        assert record.duration == "15 mins"
        assert record.status == "📥 Backlog"
        assert record.category_id == "i-work"
        assert record.needs_triage is True
        assert metrics.structured is True
        # Sender supplied a valid duration, so only the category is asked for
        assert oracle.complete.call_count == 1

    def test_task_type_typo_is_matched(self, settings, vocabularies, unreachable_oracle, now):
        record = interpret("meetng - 30 mins - Sprint review", vocabularies, settings, oracle=unreachable_oracle, now=now)

        assert record.task_type == "Meeting"

    def test_invalid_sender_duration_is_estimated(self, settings, vocabularies, now):
        oracle = _routing_oracle("💼 Work", "45 mins")

        record = interpret("Call - whenever - Dentist", vocabularies, settings, oracle=oracle, now=now)

        assert record.duration == "45 mins"

    def test_shortcut_applies_to_structured_message(self, settings, vocabularies, unreachable_oracle, now):
        record = interpret("!urgent Call - 15 mins - Dentist", vocabularies, settings, oracle=unreachable_oracle, now=now)

        assert record.status == "⭐️ Today"
        assert record.task_type == "Call"

    def test_two_segments_is_rejected(self, settings, vocabularies, unreachable_oracle, now):
        with pytest.raises(TaskInputError):
            interpret("a - b", vocabularies, settings, oracle=unreachable_oracle, now=now)

    def test_empty_type_vocabulary_is_rejected(self, settings, empty_vocabularies, unreachable_oracle, now):
        with pytest.raises(TaskInputError) as exc_info:
            interpret("Call - 15 mins - Dentist", empty_vocabularies, settings, oracle=unreachable_oracle, now=now)

        assert exc_info.value.field == "task_type"
        unreachable_oracle.complete.assert_not_called()
