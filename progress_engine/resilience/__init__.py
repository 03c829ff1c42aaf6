"""Retry handling for optimistic-concurrency conflicts"""

from progress_engine.resilience.retry import retry_with_backoff, with_retry, is_retryable_error, calculate_backoff

__all__ = [
    "retry_with_backoff",
    "with_retry",
    "is_retryable_error",
    "calculate_backoff",
]
