"""
Streak Tracking System

Tracks one calendar-day streak per user. Two instants are compared by their
civil date in the single reference timezone:

- SAME_DAY: streak unchanged, no milestone
- NEXT_DAY: streak + 1, milestone at 7 and 30
- GAP: more than one civil day, or no prior activity: streak restarts at 1

Elapsed seconds never matter: 23:59 followed by 00:01 the next day is NEXT_DAY.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional
import logging

from progress_engine import config
from progress_engine.models.progress import UserProgress
from progress_engine.utils.datetime_helpers import to_civil_date

logger = logging.getLogger(__name__)


class DayRelation(str, Enum):
    """How a session's civil date relates to the last active day"""
    SAME_DAY = "same_day"
    NEXT_DAY = "next_day"
    GAP = "gap"


@dataclass(frozen=True)
class StreakUpdate:
    """Streak outcome for one session, before it is applied"""
    relation: DayRelation
    civil_date: date
    previous_streak: int
    current_streak: int
    longest_streak: int
    milestone_reached: Optional[int]
    is_first_session_today: bool


def classify_day(last_activity_date: Optional[date], today: date) -> DayRelation:
    """
    Classify today's civil date against the last active civil date

    A date earlier than the last active day (an event arriving late) is
    treated as SAME_DAY so it never breaks or rewinds the streak. It earns
    no first-of-day bonus and does not count toward the last active day.
    """
    if last_activity_date is None:
        return DayRelation.GAP

    if today <= last_activity_date:
        return DayRelation.SAME_DAY

    if today - last_activity_date == timedelta(days=1):
        return DayRelation.NEXT_DAY

    return DayRelation.GAP


def update_streak(progress: UserProgress, now: datetime) -> StreakUpdate:
    """
    Compute the streak outcome of a session completed at `now`

    Does not mutate `progress`; see apply_streak().

    Args:
        progress: Aggregate as read at pipeline start
        now: Timezone-aware completion instant

    Returns:
        StreakUpdate
    """
    today = to_civil_date(now)
    relation = classify_day(progress.last_activity_date, today)

    previous = progress.current_streak
    milestone = None

    if relation is DayRelation.SAME_DAY:
        current = previous
        longest = progress.longest_streak

    elif relation is DayRelation.NEXT_DAY:
        current = previous + 1
        longest = max(progress.longest_streak, current)
        if current in config.STREAK_MILESTONE_BONUSES:
            milestone = current

    else:
        current = 1
        longest = max(progress.longest_streak, current)
        if progress.last_activity_date is not None and previous > 1:
            logger.info(
                f"User {progress.user_id} streak broken. Was {previous}, "
                f"gap was {(today - progress.last_activity_date).days} days"
            )

    return StreakUpdate(
        relation=relation,
        civil_date=today,
        previous_streak=previous,
        current_streak=current,
        longest_streak=longest,
        milestone_reached=milestone,
        is_first_session_today=relation is not DayRelation.SAME_DAY,
    )


def apply_streak(progress: UserProgress, update: StreakUpdate) -> None:
    """Write a streak outcome into the working copy of the aggregate"""
    progress.current_streak = update.current_streak
    progress.longest_streak = update.longest_streak

    if update.is_first_session_today:
        progress.last_activity_date = update.civil_date
        progress.sessions_on_last_activity_day = 1
        progress.first_session_of_day_count += 1
    elif update.civil_date == progress.last_activity_date:
        progress.sessions_on_last_activity_day += 1
    else:
        # Late event: the day counter belongs to last_activity_date
        logger.info(
            f"Late session for user {progress.user_id} on {update.civil_date}, "
            f"last active {progress.last_activity_date}"
        )

    logger.info(
        f"Updated streak for user {progress.user_id}: "
        f"{update.previous_streak} → {update.current_streak} days ({update.relation.value})"
    )
    if update.milestone_reached:
        logger.info(f"User {progress.user_id} reached {update.milestone_reached}-day streak milestone")
