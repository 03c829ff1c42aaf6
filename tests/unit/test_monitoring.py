"""Tests for monitoring infrastructure"""
import pytest
from unittest.mock import patch
from prometheus_client import CollectorRegistry

from progress_engine.models.progress import ProgressResult
from progress_engine.monitoring.prometheus_metrics import (
    PrometheusMetrics,
    record_conflict,
    record_progress_result,
    record_retry,
    track_session_processing,
    track_store_operation,
)


@pytest.fixture
def registry():
    """Isolated Prometheus registry"""
    return CollectorRegistry()


@pytest.fixture
def enabled_metrics(registry):
    """Enabled metrics bound to the isolated registry"""
    metrics = PrometheusMetrics(enabled=True, registry=registry)
    with patch('progress_engine.monitoring.prometheus_metrics.metrics', metrics):
        yield metrics


def make_result(**overrides):
    fields = dict(
        user_id="user_123", xp_gained=700, session_xp=150, badge_xp=550,
        old_level=1, new_level=3, leveled_up=True, levels_gained=2, total_xp=700,
        current_streak=1, longest_streak=1, day_relation="gap",
        newly_unlocked_badge_ids=["first_steps", "marathon"],
    )
    fields.update(overrides)
    return ProgressResult(**fields)


class TestPrometheusMetrics:
    """Test Prometheus metrics tracking"""

    def test_metrics_disabled(self):
        """Test disabled metrics register nothing"""
        metrics = PrometheusMetrics(enabled=False)
        assert metrics.enabled is False

    def test_metrics_initialization(self, registry):
        """Test metrics are initialized correctly"""
        metrics = PrometheusMetrics(enabled=True, registry=registry)
        assert metrics.enabled is True

    def test_helpers_noop_when_disabled(self):
        """Test helpers are safe with metrics disabled"""
        with patch('progress_engine.monitoring.prometheus_metrics.metrics', PrometheusMetrics(enabled=False)):
            with track_session_processing():
                pass
            with track_store_operation("get"):
                pass
            record_retry("attempt")
            record_conflict()
            record_progress_result(make_result())

    def test_track_session_processing_success(self, enabled_metrics, registry):
        """Test successful sessions are counted"""
        with track_session_processing():
            pass

        assert registry.get_sample_value('sessions_processed_total', {'status': 'success'}) == 1

    def test_track_session_processing_error(self, enabled_metrics, registry):
        """Test failed sessions are counted and the error propagates"""
        with pytest.raises(RuntimeError):
            with track_session_processing():
                raise RuntimeError("boom")

        assert registry.get_sample_value('sessions_processed_total', {'status': 'error'}) == 1

    def test_track_store_operation(self, enabled_metrics, registry):
        """Test store calls are counted per operation"""
        with track_store_operation("commit"):
            pass

        assert registry.get_sample_value(
            'progress_store_operations_total', {'operation': 'commit', 'status': 'success'}
        ) == 1

    def test_record_conflict_and_retry(self, enabled_metrics, registry):
        """Test conflict and retry counters"""
        record_conflict()
        record_retry("_process_session_attempt")

        assert registry.get_sample_value('progress_commit_conflicts_total') == 1
        assert registry.get_sample_value(
            'progress_retries_total', {'operation': '_process_session_attempt'}
        ) == 1

    def test_record_progress_result(self, enabled_metrics, registry):
        """Test XP, level-up and badge counters"""
        record_progress_result(make_result())

        assert registry.get_sample_value('xp_awarded_total', {'source': 'session'}) == 150
        assert registry.get_sample_value('xp_awarded_total', {'source': 'badge'}) == 550
        assert registry.get_sample_value('level_ups_total') == 1
        assert registry.get_sample_value('badges_unlocked_total', {'badge_id': 'marathon'}) == 1
