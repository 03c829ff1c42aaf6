"""Retry logic with exponential backoff and jitter

Re-runs a whole read-compute-commit attempt when the commit loses a
version race:
1. Only ConflictError is retried; a conflict means nothing was written
2. Uses exponential backoff with jitter so racing writers spread out
3. Gives up after max retries and re-raises the last conflict
"""

import asyncio
import random
import logging
from typing import Callable, Any, Optional, TypeVar
from functools import wraps

from progress_engine import config
from progress_engine.exceptions import ConflictError
from progress_engine.monitoring.prometheus_metrics import record_retry

logger = logging.getLogger(__name__)

T = TypeVar('T')

JITTER = 0.1  # 10% random jitter


def is_retryable_error(exc: Exception) -> bool:
    """
    Determine if an attempt can safely be re-run from a fresh read.

    Retryable errors:
    - ConflictError (stale version, nothing committed)

    Non-retryable errors:
    - Validation errors
    - Timeouts and connection failures (the commit may have landed)

    Args:
        exc: The exception to check

    Returns:
        True if error should be retried, False otherwise
    """
    return isinstance(exc, ConflictError)


def calculate_backoff(
    attempt: int,
    base_delay: Optional[float] = None,
    max_delay: Optional[float] = None
) -> float:
    """
    Calculate exponential backoff delay with jitter.

    Formula: delay = min(base_delay * (2 ** attempt), max_delay) + jitter
    Jitter is random value between -10% and +10% of delay

    Args:
        attempt: The retry attempt number (0-indexed)

    Returns:
        Delay in seconds
    """
    base = config.BASE_RETRY_DELAY if base_delay is None else base_delay
    cap = config.MAX_RETRY_DELAY if max_delay is None else max_delay

    # Exponential backoff
    delay = min(base * (2 ** attempt), cap)

    # Add jitter to prevent thundering herd
    jitter_amount = random.uniform(-JITTER * delay, JITTER * delay)
    final_delay = delay + jitter_amount

    return max(final_delay, 0.0)  # Ensure non-negative


async def retry_with_backoff(
    func: Callable[..., T],
    *args: Any,
    max_retries: Optional[int] = None,
    **kwargs: Any
) -> T:
    """
    Retry async function with exponential backoff.

    Only retries conflicts. Gives up after max_retries attempts.

    Args:
        func: Async function to retry
        max_retries: Maximum number of retry attempts (default: MAX_COMMIT_RETRIES)
        *args, **kwargs: Arguments to pass to func

    Returns:
        Result from func

    Raises:
        Last exception if all retries exhausted or non-retryable error

    Example:
        result = await retry_with_backoff(run_pipeline, event, max_retries=3)
    """
    if max_retries is None:
        max_retries = config.MAX_COMMIT_RETRIES

    for attempt in range(max_retries + 1):
        try:
            return await func(*args, **kwargs)

        except Exception as e:
            if not is_retryable_error(e):
                raise

            if attempt == max_retries:
                logger.error(
                    f"[RETRY] All {max_retries} retries exhausted for {func.__name__}"
                )
                raise

            backoff = calculate_backoff(attempt)
            record_retry(func.__name__)

            logger.info(
                f"[RETRY] Attempt {attempt + 1}/{max_retries} for {func.__name__} "
                f"after {backoff:.2f}s (error: {type(e).__name__})"
            )

            await asyncio.sleep(backoff)

    raise RuntimeError("Retry logic failed unexpectedly")


def with_retry(max_retries: Optional[int] = None) -> Callable:
    """
    Decorator to add conflict retry logic to async functions.

    Example:
        @with_retry(max_retries=3)
        async def commit_attempt():
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await retry_with_backoff(func, *args, max_retries=max_retries, **kwargs)
        return wrapper
    return decorator
