"""Pytest fixtures and configuration for textask tests."""

import pytest
from datetime import datetime
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from textask.config import Settings
from textask.integrations.openai_client import OracleClient, OracleFailure, OracleSuccess
from textask.integrations.rate_limiter import InMemoryRateLimiter
from textask.models.vocabulary import CategoryCandidate, Vocabularies


# Monday; the upcoming Friday is 2026-10-23
FIXED_NOW = datetime(2026, 10, 19, 9, 30)


@pytest.fixture
def now():
    """Naive local 'current time' used to resolve relative dates."""
    return FIXED_NOW


@pytest.fixture
def settings():
    """Settings with every external service configured and UTC timestamps."""
    return Settings(
        coda_api_key="test-coda-key",
        doc_id="doc-123",
        task_table_id="grid-tasks",
        types_table_id="grid-types",
        categories_table_id="grid-categories",
        statuses_table_id="grid-statuses",
        outbound_phone="+15550001111",
        openai_api_key=None,
        oracle_timeout_sec=2.0,
        rate_limit_max=3,
        rate_limit_window_sec=60,
        timezone="UTC",
    )


@pytest.fixture
def categories():
    """A category vocabulary with its own uncategorized row."""
    return [
        CategoryCandidate(name="💼 Work", id="i-work"),
        CategoryCandidate(name="🏠 Home", id="i-home"),
        CategoryCandidate(name="❓ Uncategorized", id="i-uncat"),
    ]


@pytest.fixture
def vocabularies(categories):
    return Vocabularies(
        categories=categories,
        statuses={"today": "⭐️ Today", "this_week": "📅 This Week", "backlog": "📥 Backlog"},
        task_types=["Call", "Email", "Meeting"],
    )


@pytest.fixture
def empty_vocabularies():
    return Vocabularies()


def make_oracle(*replies):
    """Oracle mock returning the given results in order.

    Plain strings become OracleSuccess.
    """
    oracle = MagicMock(spec=OracleClient)
    oracle.complete.side_effect = [
        OracleSuccess(r) if isinstance(r, str) else r for r in replies
    ]
    return oracle


@pytest.fixture
def oracle_factory():
    return make_oracle


@pytest.fixture
def unreachable_oracle():
    """Oracle whose every call fails like a network error."""
    oracle = MagicMock(spec=OracleClient)
    oracle.complete.return_value = OracleFailure("ConnectError")
    return oracle


@pytest.fixture
def coda_client():
    """Coda client mock with empty vocabularies and a successful insert."""
    client = MagicMock()
    client.fetch_vocabularies.return_value = Vocabularies()
    client.create_record.return_value = {"id": "i-new-row"}
    return client


@pytest.fixture
def test_client(settings, coda_client, unreachable_oracle):
    """Create a FastAPI test client with overridden dependencies."""
    from textask.api.app import app
    from textask.api.dependencies import get_coda_client, get_oracle, get_rate_limiter, get_settings

    rate_limiter = InMemoryRateLimiter(settings.rate_limit_max, settings.rate_limit_window_sec)

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_coda_client] = lambda: coda_client
    app.dependency_overrides[get_oracle] = lambda: unreachable_oracle
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
