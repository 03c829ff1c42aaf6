"""Global test fixtures and utilities for progress-engine tests"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime, date, timezone
from zoneinfo import ZoneInfo

from progress_engine import config
from progress_engine.gamification.progress_store import InMemoryProgressStore
from progress_engine.models.progress import SessionEvent, UserProgress


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def mock_db_cursor():
    """Mock database cursor with standard query results"""
    cursor = AsyncMock()
    cursor.fetchone = AsyncMock(return_value=None)
    cursor.fetchall = AsyncMock(return_value=[])
    cursor.execute = AsyncMock()
    return cursor


@pytest.fixture
def mock_db_connection(mock_db_cursor):
    """Mock database connection whose cursor() yields mock_db_cursor"""
    conn = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = mock_db_cursor
    conn.commit = AsyncMock()
    conn.rollback = AsyncMock()
    return conn


@pytest.fixture
def mock_database(mock_db_connection):
    """Mock Database whose connection() yields mock_db_connection"""
    database = MagicMock()
    database.connection.return_value.__aenter__.return_value = mock_db_connection
    return database


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user_123"


@pytest.fixture
def fresh_progress(test_user_id):
    """Aggregate of a user with no sessions"""
    return UserProgress(user_id=test_user_id)


@pytest.fixture
def store():
    """Empty in-memory aggregate store"""
    return InMemoryProgressStore()


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def utc():
    """Build a UTC datetime: utc(2024, 3, 1, 20) -> 2024-03-01T20:00Z"""
    def _create(*args):
        return datetime(*args, tzinfo=timezone.utc)
    return _create


@pytest.fixture
def test_timezone():
    """Non-UTC reference timezone (US/Eastern)"""
    return ZoneInfo("America/New_York")


@pytest.fixture
def reference_timezone(monkeypatch):
    """Switch the reference timezone for the duration of a test"""
    def _set(name: str):
        monkeypatch.setattr(config, "REFERENCE_TIMEZONE", name)
    return _set


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def session_event_factory(test_user_id):
    """Build a completed-session event with sensible defaults"""
    def _create(
        duration_seconds=3600,
        completed_at=None,
        activity_label=None,
        user_id=None
    ):
        return SessionEvent(
            user_id=user_id or test_user_id,
            duration_seconds=duration_seconds,
            completed_at=completed_at or datetime(2024, 3, 1, 20, 0, 0, tzinfo=timezone.utc),
            activity_label=activity_label,
        )
    return _create


@pytest.fixture
def progress_on_day(test_user_id):
    """Aggregate whose last activity was on `day` with the given streak"""
    def _create(day: date, streak: int, longest: int = None, **fields):
        fields.setdefault("sessions_on_last_activity_day", 1)
        return UserProgress(
            user_id=test_user_id,
            current_streak=streak,
            longest_streak=streak if longest is None else longest,
            last_activity_date=day,
            **fields
        )
    return _create


# ============================================================================
# Config Fixtures
# ============================================================================

@pytest.fixture
def fast_retries(monkeypatch):
    """Make conflict backoff near-instant"""
    monkeypatch.setattr(config, "BASE_RETRY_DELAY", 0.001)
    monkeypatch.setattr(config, "MAX_RETRY_DELAY", 0.005)
