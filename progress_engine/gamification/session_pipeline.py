"""
Session Pipeline

Pure computation for one completed session:
Streak Tracker → XP Awarder → Badge Evaluator → XP Awarder.

Operates on a working copy of the aggregate; the caller commits it.
"""

from datetime import timedelta
from typing import Sequence
import logging

from progress_engine.gamification.badge_catalog import BADGE_CATALOG
from progress_engine.gamification.badge_system import check_and_award_badges
from progress_engine.gamification.streak_system import apply_streak, update_streak
from progress_engine.gamification.xp_system import apply_xp, get_session_xp_breakdown
from progress_engine.models.badge import BadgeDefinition
from progress_engine.models.progress import ProgressResult, SessionEvent, UserProgress, XPBreakdownItem
from progress_engine.utils.datetime_helpers import to_reference_time, to_utc

logger = logging.getLogger(__name__)

NOON_HOUR = 12
AFTER_MIDNIGHT_END_HOUR = 5
LATE_NIGHT_START_HOUR = 23


def record_session_stats(progress: UserProgress, event: SessionEvent) -> None:
    """
    Update session counters on the working copy

    Clock-boundary counters use the session's start time in the
    reference timezone.
    """
    completed_at = to_utc(event.completed_at)
    started_local = to_reference_time(completed_at - timedelta(seconds=event.duration_seconds))

    progress.total_sessions += 1
    progress.total_duration_seconds += event.duration_seconds
    progress.longest_session_seconds = max(progress.longest_session_seconds, event.duration_seconds)

    if event.activity_label:
        progress.activity_type_set.add(event.activity_label)

    if started_local.hour < NOON_HOUR:
        progress.sessions_before_noon_count += 1
    if started_local.hour < AFTER_MIDNIGHT_END_HOUR:
        progress.sessions_after_midnight_count += 1
    if started_local.hour >= LATE_NIGHT_START_HOUR:
        progress.sessions_after_11pm_count += 1

    if progress.first_session_at is None:
        progress.first_session_at = completed_at
    if progress.last_session_at is None or completed_at > progress.last_session_at:
        progress.last_session_at = completed_at


def apply_session_event(
    progress: UserProgress,
    event: SessionEvent,
    catalog: Sequence[BadgeDefinition] = BADGE_CATALOG
) -> ProgressResult:
    """
    Apply one validated session event to the working copy of the aggregate

    Badge rewards go back through the XP system; evaluation repeats until no
    further badge unlocks, so the result is a fixed point and re-evaluating
    it unlocks nothing.

    Args:
        progress: Working copy (mutated in place)
        event: Validated session event
        catalog: Badge definitions in evaluation order

    Returns:
        ProgressResult for the event
    """
    old_level = progress.level
    old_xp = progress.xp

    streak = update_streak(progress, event.completed_at)
    session_xp = get_session_xp_breakdown(
        event.duration_seconds,
        streak.is_first_session_today,
        streak.milestone_reached
    )

    apply_streak(progress, streak)
    record_session_stats(progress, event)
    apply_xp(progress, session_xp["total"], reason="Session completed")

    breakdown = [XPBreakdownItem(**item) for item in session_xp["breakdown"]]
    unlocked_ids = []
    badge_xp = 0

    # Each round unlocks at least one badge, so the catalog size bounds it
    for _ in range(len(catalog)):
        newly_unlocked = check_and_award_badges(progress, catalog, now=event.completed_at)
        if not newly_unlocked:
            break

        reward = sum(badge.xp_reward for badge in newly_unlocked)
        apply_xp(progress, reward, reason=f"badges {', '.join(b.id for b in newly_unlocked)}")

        badge_xp += reward
        unlocked_ids.extend(badge.id for badge in newly_unlocked)
        breakdown.extend(
            XPBreakdownItem(source=f"Badge: {badge.name}", amount=badge.xp_reward)
            for badge in newly_unlocked
        )

    new_level = progress.level

    return ProgressResult(
        user_id=progress.user_id,
        xp_gained=progress.xp - old_xp,
        session_xp=session_xp["total"],
        badge_xp=badge_xp,
        old_level=old_level,
        new_level=new_level,
        leveled_up=new_level > old_level,
        levels_gained=new_level - old_level,
        total_xp=progress.xp,
        current_streak=progress.current_streak,
        longest_streak=progress.longest_streak,
        day_relation=streak.relation.value,
        streak_milestone=streak.milestone_reached,
        newly_unlocked_badge_ids=unlocked_ids,
        xp_breakdown=breakdown,
    )
