"""
Aggregate store contract and in-memory implementation

Every commit carries the version read at pipeline start. A mismatch raises
ConflictError; a successful commit stores the document with version + 1.
Version 0 means "not yet created".
"""

import asyncio
import logging
from typing import Dict, Optional, Protocol

from progress_engine.exceptions import ConflictError
from progress_engine.models.progress import UserProgress

logger = logging.getLogger(__name__)


class ProgressStore(Protocol):
    """Read / compare-and-swap commit of the per-user aggregate"""

    async def get(self, user_id: str) -> Optional[UserProgress]:
        ...

    async def commit(self, user_id: str, progress: UserProgress, expected_version: int) -> UserProgress:
        ...

    async def delete(self, user_id: str) -> None:
        """Administrative reset; the next commit starts again from version 0"""
        ...


class InMemoryProgressStore:
    """In-process store holding serialized snapshots, one per user"""

    def __init__(self):
        self._documents: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, user_id: str) -> Optional[UserProgress]:
        """Get a fresh copy of the user's aggregate, or None"""
        async with self._lock:
            document = self._documents.get(user_id)
        if document is None:
            return None
        return UserProgress.model_validate_json(document)

    async def commit(self, user_id: str, progress: UserProgress, expected_version: int) -> UserProgress:
        """
        Store progress if the stored version still equals expected_version

        Returns:
            The committed aggregate (version incremented)

        Raises:
            ConflictError: On version mismatch
        """
        async with self._lock:
            current = self._documents.get(user_id)
            actual_version = UserProgress.model_validate_json(current).version if current else 0

            if actual_version != expected_version:
                raise ConflictError(
                    expected_version=expected_version,
                    actual_version=actual_version,
                    user_id=user_id,
                    operation="commit_progress"
                )

            committed = progress.model_copy(update={"version": expected_version + 1}, deep=True)
            self._documents[user_id] = committed.model_dump_json()

        logger.debug(f"Committed progress for user {user_id} at version {committed.version}")
        return committed

    async def delete(self, user_id: str) -> None:
        """Drop a user's aggregate (administrative reset)"""
        async with self._lock:
            self._documents.pop(user_id, None)
