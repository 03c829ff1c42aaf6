"""Prometheus metrics definitions and helpers"""
import logging
import time
from contextlib import contextmanager

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from progress_engine.config import ENABLE_PROMETHEUS

logger = logging.getLogger(__name__)


class PrometheusMetrics:
    """Container for all Prometheus metrics"""

    def __init__(self, enabled: bool = ENABLE_PROMETHEUS, registry: CollectorRegistry = REGISTRY):
        if not enabled:
            logger.info("Prometheus metrics disabled")
            self._enabled = False
            return

        # Session pipeline metrics
        self.sessions_processed_total = Counter(
            'sessions_processed_total',
            'Total completed sessions processed',
            ['status'],
            registry=registry
        )

        self.session_processing_duration_seconds = Histogram(
            'session_processing_duration_seconds',
            'Session pipeline latency, including retries',
            buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
            registry=registry
        )

        # Gamification metrics
        self.xp_awarded_total = Counter(
            'xp_awarded_total',
            'Total XP awarded',
            ['source'],
            registry=registry
        )

        self.level_ups_total = Counter(
            'level_ups_total',
            'Total level-up events',
            registry=registry
        )

        self.badges_unlocked_total = Counter(
            'badges_unlocked_total',
            'Total badge unlocks',
            ['badge_id'],
            registry=registry
        )

        # Store metrics
        self.store_operations_total = Counter(
            'progress_store_operations_total',
            'Total aggregate store operations',
            ['operation', 'status'],
            registry=registry
        )

        self.store_operation_duration_seconds = Histogram(
            'progress_store_operation_duration_seconds',
            'Aggregate store latency',
            ['operation'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
            registry=registry
        )

        self.commit_conflicts_total = Counter(
            'progress_commit_conflicts_total',
            'Total optimistic-concurrency conflicts on commit',
            registry=registry
        )

        self.retries_total = Counter(
            'progress_retries_total',
            'Total pipeline retries',
            ['operation'],
            registry=registry
        )

        self._enabled = True
        logger.info("Prometheus metrics initialized")

    @property
    def enabled(self) -> bool:
        """Check if metrics are enabled"""
        return self._enabled


# Global metrics instance
metrics = PrometheusMetrics()


@contextmanager
def track_session_processing():
    """Track session pipeline metrics"""
    if not metrics.enabled:
        yield
        return

    start_time = time.time()
    status = "error"  # Default to error

    try:
        yield
        status = "success"
    finally:
        metrics.session_processing_duration_seconds.observe(time.time() - start_time)
        metrics.sessions_processed_total.labels(status=status).inc()


@contextmanager
def track_store_operation(operation: str):
    """Track aggregate store metrics"""
    if not metrics.enabled:
        yield
        return

    start_time = time.time()
    status = "error"

    try:
        yield
        status = "success"
    finally:
        metrics.store_operation_duration_seconds.labels(operation=operation).observe(time.time() - start_time)
        metrics.store_operations_total.labels(operation=operation, status=status).inc()


def record_retry(operation: str) -> None:
    """Count a pipeline retry"""
    if not metrics.enabled:
        return
    metrics.retries_total.labels(operation=operation).inc()


def record_conflict() -> None:
    """Count a commit conflict"""
    if not metrics.enabled:
        return
    metrics.commit_conflicts_total.inc()


def record_progress_result(result) -> None:
    """Record XP, level-up and badge counters for a committed ProgressResult"""
    if not metrics.enabled:
        return

    metrics.xp_awarded_total.labels(source="session").inc(result.session_xp)
    if result.badge_xp:
        metrics.xp_awarded_total.labels(source="badge").inc(result.badge_xp)
    if result.leveled_up:
        metrics.level_ups_total.inc()
    for badge_id in result.newly_unlocked_badge_ids:
        metrics.badges_unlocked_total.labels(badge_id=badge_id).inc()
