"""
Standardized Date/Time Handling Utilities

CRITICAL RULES:
- Session instants are timezone-aware and stored in UTC (use to_utc())
- Streak days are civil dates in the single reference timezone (use to_civil_date())
- Never mix naive and aware datetimes
"""

import logging
from datetime import datetime, date
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from progress_engine import config
from progress_engine.exceptions import ValidationError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def get_reference_timezone() -> ZoneInfo:
    """
    Get the timezone every instant is bucketed into for civil-day logic

    Returns:
        ZoneInfo for REFERENCE_TIMEZONE
    """
    return _zone(config.REFERENCE_TIMEZONE)


def now_utc() -> datetime:
    """Get current datetime in UTC (timezone-aware)"""
    return datetime.now(ZoneInfo("UTC"))


def ensure_aware(dt: datetime, field: str = "completed_at") -> datetime:
    """
    Reject naive datetimes

    Raises:
        ValidationError: If dt has no tzinfo
    """
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValidationError(
            message="Timestamp must be timezone-aware",
            field=field,
            value=dt.isoformat()
        )
    return dt


def to_utc(dt: datetime) -> datetime:
    """
    Convert an aware datetime to UTC for storage

    Args:
        dt: Timezone-aware datetime

    Returns:
        Datetime in UTC
    """
    return ensure_aware(dt).astimezone(ZoneInfo("UTC"))


def to_reference_time(dt: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """Convert an aware datetime to the reference timezone"""
    return ensure_aware(dt).astimezone(tz or get_reference_timezone())


def to_civil_date(dt: datetime, tz: Optional[ZoneInfo] = None) -> date:
    """
    Civil date of an instant in the reference timezone

    Example:
        >>> to_civil_date(datetime(2024, 3, 1, 23, 59, 30, tzinfo=ZoneInfo("UTC")))
        datetime.date(2024, 3, 1)
    """
    return to_reference_time(dt, tz).date()
