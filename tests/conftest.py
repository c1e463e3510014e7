"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from practice_engine.models import CandidateQuestion, HistoryRecord  # noqa: E402
from practice_engine.repositories import HistoryStore  # noqa: E402

FIXED_NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class MockHistoryStore(HistoryStore):
    """History store backed by a dict; records every lookup."""

    def __init__(self, records=()):
        self.records = {(r.user_id, r.candidate_id): r for r in records}
        self.lookups = []

    async def get_history(self, user_id, candidate_id):
        self.lookups.append((user_id, candidate_id))
        return self.records.get((user_id, candidate_id))

    async def list_history(self, user_id):
        return [r for (uid, _), r in self.records.items() if uid == user_id]


class FailingHistoryStore(HistoryStore):
    """History store whose every call raises, optionally for selected ids only."""

    def __init__(self, failing_ids=None, records=()):
        self.failing_ids = set(failing_ids) if failing_ids is not None else None
        self.records = {(r.user_id, r.candidate_id): r for r in records}

    async def get_history(self, user_id, candidate_id):
        if self.failing_ids is None or candidate_id in self.failing_ids:
            raise ConnectionError("history store unreachable")
        return self.records.get((user_id, candidate_id))

    async def list_history(self, user_id):
        raise ConnectionError("history store unreachable")


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed 'current time' for deterministic day arithmetic."""
    return FIXED_NOW


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def days_ago():
    return lambda days: FIXED_NOW - timedelta(days=days)


@pytest.fixture
def days_ahead():
    return lambda days: FIXED_NOW + timedelta(days=days)


@pytest.fixture
def empty_store():
    return MockHistoryStore()


@pytest.fixture
def sample_pool():
    """Three candidates at different levels and topics."""
    return [
        CandidateQuestion(id="q-dp", title="Coin Change", difficulty="Medium", tags=["DP"], platform="leetcode"),
        CandidateQuestion(id="q-graph", title="Course Schedule", difficulty="Hard", tags=["Graph"], platform="leetcode"),
        CandidateQuestion(id="q-array", title="Two Sum", difficulty="Easy", tags=["Array"], platform="leetcode"),
    ]


@pytest.fixture
def make_record():
    """Factory for HistoryRecord with sensible defaults."""
    def _make(candidate_id, status="solved", user_id="alice", **kwargs):
        return HistoryRecord(user_id=user_id, candidate_id=candidate_id, status=status, **kwargs)
    return _make


@pytest.fixture
def store_with():
    """Factory: MockHistoryStore pre-loaded with records."""
    return lambda *records: MockHistoryStore(records)


@pytest.fixture
def failing_store():
    """Factory: FailingHistoryStore failing for the given ids (all when None)."""
    return lambda failing_ids=None, records=(): FailingHistoryStore(failing_ids, records)
