"""Monitoring infrastructure for the progression engine"""
from progress_engine.monitoring.prometheus_metrics import (
    metrics,
    track_session_processing,
    track_store_operation,
    record_retry,
    record_conflict,
    record_progress_result,
)

__all__ = [
    "metrics",
    "track_session_processing",
    "track_store_operation",
    "record_retry",
    "record_conflict",
    "record_progress_result",
]
