"""
ProgressService - Progression Business Logic

Runs the session pipeline against the aggregate store:
read → streak → XP → badges → XP → compare-and-swap commit,
re-running the whole attempt from a fresh read on a version conflict.
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional, Sequence, TypeVar

from progress_engine import config
from progress_engine.exceptions import ConflictError, StoreTimeoutError
from progress_engine.gamification.badge_catalog import BADGE_CATALOG
from progress_engine.gamification.badge_system import get_badge_recommendations, get_user_badges
from progress_engine.gamification.leveling import get_level_info
from progress_engine.gamification.progress_store import ProgressStore
from progress_engine.gamification.session_pipeline import apply_session_event
from progress_engine.models.badge import BadgeDefinition
from progress_engine.models.progress import ProgressResult, SessionEvent, UserProgress
from progress_engine.monitoring.prometheus_metrics import (
    record_conflict,
    record_progress_result,
    track_session_processing,
    track_store_operation,
)
from progress_engine.resilience.retry import retry_with_backoff
from progress_engine.validators import validate_session_event, validate_user_id

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProgressService:
    """
    Service for session progression.

    Responsibilities:
    - Validating completed-session events
    - Running the streak / XP / badge pipeline
    - Committing the aggregate with optimistic concurrency
    - Read-side summaries (level info, badges)
    """

    def __init__(
        self,
        store: ProgressStore,
        catalog: Sequence[BadgeDefinition] = BADGE_CATALOG,
        max_retries: Optional[int] = None,
        store_timeout: Optional[float] = None
    ):
        """
        Initialize ProgressService.

        Args:
            store: Aggregate store (in-memory or PostgreSQL)
            catalog: Badge catalog, loaded once
            max_retries: Conflict retry budget (default: MAX_COMMIT_RETRIES)
            store_timeout: Per-call store timeout in seconds (default: STORE_TIMEOUT_SECONDS)
        """
        self.store = store
        self.catalog = catalog
        self.max_retries = config.MAX_COMMIT_RETRIES if max_retries is None else max_retries
        self.store_timeout = config.STORE_TIMEOUT_SECONDS if store_timeout is None else store_timeout
        logger.debug("ProgressService initialized")

    async def process_session(self, event: SessionEvent) -> ProgressResult:
        """
        Process a completed session.

        Args:
            event: Completed-session event

        Returns:
            ProgressResult

        Raises:
            ValidationError: Event rejected before any read or write
            ConflictError: Retry budget exhausted
            DatabaseError: Store failure
        """
        event = validate_session_event(event)

        with track_session_processing():
            result = await retry_with_backoff(
                self._process_session_attempt,
                event,
                max_retries=self.max_retries
            )

        record_progress_result(result)
        logger.info(
            f"Progress processed for session: user={event.user_id}, "
            f"xp={result.xp_gained}, level={result.new_level}, streak={result.current_streak}, "
            f"badges={len(result.newly_unlocked_badge_ids)}"
        )
        return result

    async def _process_session_attempt(self, event: SessionEvent) -> ProgressResult:
        """One read-compute-commit attempt; raises ConflictError on a lost race"""
        progress = await self._call_store("get", self.store.get(event.user_id), event.user_id)
        if progress is None:
            progress = UserProgress(user_id=event.user_id)
            logger.info(f"Creating progress record for user {event.user_id}")

        expected_version = progress.version
        result = apply_session_event(progress, event, self.catalog)

        try:
            await self._call_store(
                "commit",
                self.store.commit(event.user_id, progress, expected_version),
                event.user_id
            )
        except ConflictError:
            record_conflict()
            raise

        return result

    async def _call_store(self, operation: str, call: Awaitable[T], user_id: str) -> T:
        """Await a store call under the configured timeout"""
        with track_store_operation(operation):
            try:
                return await asyncio.wait_for(call, timeout=self.store_timeout)
            except asyncio.TimeoutError as e:
                raise StoreTimeoutError(
                    message=f"Store {operation} timed out after {self.store_timeout}s",
                    user_id=user_id,
                    operation=f"{operation}_progress",
                    cause=e
                )

    async def get_user_progress(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get user's progress summary.

        Returns:
            {
                'user_id': str,
                'xp': int,
                'level': int,
                'xp_to_next_level': int,
                'progress_percent': float,
                'current_streak': int,
                'longest_streak': int,
                'total_sessions': int,
                'total_duration_seconds': int,
                'badge_count': int
            }
            or None if the user has no sessions yet
        """
        validate_user_id(user_id)
        progress = await self._call_store("get", self.store.get(user_id), user_id)
        if progress is None:
            return None

        level_info = get_level_info(progress.xp)
        return {
            "user_id": user_id,
            "xp": progress.xp,
            "level": level_info["current_level"],
            "xp_to_next_level": level_info["xp_to_next_level"],
            "progress_percent": level_info["progress_percent"],
            "current_streak": progress.current_streak,
            "longest_streak": progress.longest_streak,
            "total_sessions": progress.total_sessions,
            "total_duration_seconds": progress.total_duration_seconds,
            "badge_count": len(progress.unlocked_badge_ids),
        }

    async def get_user_badges(self, user_id: str) -> List[Dict[str, Any]]:
        """Get user's unlocked badges, most recent first"""
        validate_user_id(user_id)
        progress = await self._call_store("get", self.store.get(user_id), user_id)
        if progress is None:
            return []
        return get_user_badges(progress)

    async def get_badge_recommendations(self, user_id: str, limit: int = 3) -> List[Dict[str, Any]]:
        """Get locked badges closest to completion"""
        validate_user_id(user_id)
        progress = await self._call_store("get", self.store.get(user_id), user_id)
        if progress is None:
            progress = UserProgress(user_id=user_id)
        return get_badge_recommendations(progress, self.catalog, limit=limit)

    async def reset_user_progress(self, user_id: str) -> None:
        """Drop a user's aggregate; their next session starts from scratch"""
        validate_user_id(user_id)
        await self._call_store("delete", self.store.delete(user_id), user_id)
        logger.info(f"Progress reset for user {user_id}")
