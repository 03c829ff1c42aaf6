"""User progress database queries"""
import logging
from typing import Optional

import psycopg
from psycopg.types.json import Jsonb

from progress_engine.db.connection import Database, db as default_db
from progress_engine.exceptions import ConflictError, wrap_external_exception
from progress_engine.models.progress import UserProgress

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS user_progress (
    user_id     VARCHAR(64) PRIMARY KEY,
    document    JSONB       NOT NULL,
    version     INTEGER     NOT NULL CHECK (version > 0),
    created_at  TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""


def _to_document(progress: UserProgress) -> Jsonb:
    return Jsonb(progress.model_dump(mode="json", exclude={"user_id", "version"}))


class PostgresProgressStore:
    """
    Aggregate store backed by one PostgreSQL row per user

    The row holds the aggregate as JSONB plus an integer version used for
    compare-and-swap commits.
    """

    def __init__(self, database: Database = default_db):
        self.db = database

    async def ensure_schema(self) -> None:
        """Create the user_progress table if missing"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(SCHEMA_SQL)
                await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="ensure_schema")
        logger.info("user_progress schema ready")

    async def get(self, user_id: str) -> Optional[UserProgress]:
        """
        Get user's aggregate

        Returns:
            UserProgress with its stored version, or None if never committed
        """
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        SELECT document, version
                        FROM user_progress
                        WHERE user_id = %s
                        """,
                        (user_id,)
                    )
                    row = await cur.fetchone()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="get_progress", user_id=user_id)

        if not row:
            return None

        return UserProgress.model_validate({
            **row["document"],
            "user_id": user_id,
            "version": row["version"],
        })

    async def commit(self, user_id: str, progress: UserProgress, expected_version: int) -> UserProgress:
        """
        Compare-and-swap commit

        expected_version 0 inserts a new row; any other value updates the row
        only if its version still matches.

        Returns:
            The committed aggregate (version incremented)

        Raises:
            ConflictError: If another writer committed first
        """
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    if expected_version == 0:
                        await cur.execute(
                            """
                            INSERT INTO user_progress (user_id, document, version)
                            VALUES (%s, %s, 1)
                            ON CONFLICT (user_id) DO NOTHING
                            RETURNING version
                            """,
                            (user_id, _to_document(progress))
                        )
                    else:
                        await cur.execute(
                            """
                            UPDATE user_progress
                            SET document = %s,
                                version = version + 1,
                                updated_at = CURRENT_TIMESTAMP
                            WHERE user_id = %s AND version = %s
                            RETURNING version
                            """,
                            (_to_document(progress), user_id, expected_version)
                        )
                    row = await cur.fetchone()

                    if not row:
                        await conn.rollback()
                        await cur.execute(
                            "SELECT version FROM user_progress WHERE user_id = %s",
                            (user_id,)
                        )
                        current = await cur.fetchone()
                        raise ConflictError(
                            expected_version=expected_version,
                            actual_version=current["version"] if current else 0,
                            user_id=user_id,
                            operation="commit_progress"
                        )

                await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="commit_progress", user_id=user_id)

        logger.debug(f"Committed progress for user {user_id} at version {row['version']}")
        return progress.model_copy(update={"version": row["version"]}, deep=True)

    async def delete(self, user_id: str) -> None:
        """Drop a user's aggregate (administrative reset)"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("DELETE FROM user_progress WHERE user_id = %s", (user_id,))
                await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="delete_progress", user_id=user_id)
        logger.info(f"Deleted progress for user {user_id}")
