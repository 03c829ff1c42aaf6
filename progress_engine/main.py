"""Command-line entry point: record one completed session against PostgreSQL"""
import argparse
import asyncio
import logging
from datetime import datetime
from typing import Optional, Sequence

from progress_engine.config import validate_config, LOG_LEVEL
from progress_engine.db.connection import db
from progress_engine.db.progress_queries import PostgresProgressStore
from progress_engine.exceptions import ProgressEngineError
from progress_engine.models.progress import SessionEvent
from progress_engine.services.progress_service import ProgressService
from progress_engine.utils.datetime_helpers import now_utc

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Record a completed work session")
    parser.add_argument("user_id", help="User identifier")
    parser.add_argument("duration", type=int, help="Session duration in seconds")
    parser.add_argument(
        "--completed-at",
        type=datetime.fromisoformat,
        default=None,
        help="ISO 8601 completion time with offset (default: now)"
    )
    parser.add_argument("--activity", default=None, help="Activity label")
    return parser.parse_args(argv)


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point"""
    args = parse_args(argv)
    try:
        # Validate configuration
        logger.info("Validating configuration...")
        validate_config()

        # Initialize database
        logger.info("Initializing database connection pool...")
        await db.init_pool()

        store = PostgresProgressStore(db)
        await store.ensure_schema()

        service = ProgressService(store)
        result = await service.process_session(SessionEvent(
            user_id=args.user_id,
            duration_seconds=args.duration,
            completed_at=args.completed_at or now_utc(),
            activity_label=args.activity
        ))
        print(result.model_dump_json(indent=2))
        return 0

    except ProgressEngineError as e:
        print(e.user_message)
        return 1
    finally:
        logger.info("Closing database connection...")
        await db.close_pool()


def run() -> None:
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()
