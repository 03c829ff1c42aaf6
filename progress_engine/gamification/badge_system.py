"""
Badge System

Checks the static badge catalog against a user's aggregate and unlocks
badges whose conditions are newly satisfied.

Features:
- Deterministic evaluation order (catalog order)
- Idempotent: already-unlocked badges are skipped, never revoked
- Misconfigured conditions are skipped with a warning
- Progress tracking for locked badges
"""

from typing import Callable, Dict, List, Optional, Sequence
from datetime import datetime, timezone
import logging

from progress_engine.exceptions import CatalogError
from progress_engine.gamification.badge_catalog import BADGE_CATALOG, get_badge
from progress_engine.models.badge import (
    BadgeCondition,
    BadgeDefinition,
    CustomPredicate,
    FieldThreshold,
    SetCardinality,
)
from progress_engine.models.progress import UserProgress
from progress_engine.utils.datetime_helpers import now_utc, to_utc

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

NUMERIC_FIELDS = frozenset({
    "xp",
    "level",
    "total_sessions",
    "total_duration_seconds",
    "current_streak",
    "longest_streak",
    "longest_session_seconds",
    "first_session_of_day_count",
    "sessions_before_noon_count",
    "sessions_after_midnight_count",
    "sessions_after_11pm_count",
})

SET_FIELDS = frozenset({
    "activity_type_set",
    "unlocked_badge_ids",
})

_PREDICATE_VALUES: Dict[str, Callable[[UserProgress], int]] = {
    "sessions_in_one_day": lambda p: p.sessions_on_last_activity_day,
    "single_session_duration": lambda p: p.longest_session_seconds,
    "sessions_before_noon": lambda p: p.sessions_before_noon_count,
    "sessions_after_midnight": lambda p: p.sessions_after_midnight_count,
    "sessions_after_11pm": lambda p: p.sessions_after_11pm_count,
}


def condition_value(condition: BadgeCondition, progress: UserProgress, badge_id: Optional[str] = None) -> int:
    """
    Current value of the quantity a condition measures

    Raises:
        CatalogError: If the condition names an unknown field or predicate
    """
    if isinstance(condition, FieldThreshold):
        if condition.field_name not in NUMERIC_FIELDS:
            raise CatalogError(
                f"Badge condition references unknown numeric field '{condition.field_name}'",
                badge_id=badge_id,
                field=condition.field_name
            )
        return getattr(progress, condition.field_name)

    if isinstance(condition, SetCardinality):
        if condition.field_name not in SET_FIELDS:
            raise CatalogError(
                f"Badge condition references unknown set field '{condition.field_name}'",
                badge_id=badge_id,
                field=condition.field_name
            )
        return len(getattr(progress, condition.field_name))

    if isinstance(condition, CustomPredicate):
        value_of = _PREDICATE_VALUES.get(condition.predicate)
        if value_of is None:
            raise CatalogError(
                f"Badge condition references unknown predicate '{condition.predicate}'",
                badge_id=badge_id,
                field=condition.predicate
            )
        return value_of(progress)

    raise CatalogError(
        f"Unsupported badge condition {type(condition).__name__}",
        badge_id=badge_id
    )


def is_condition_met(badge: BadgeDefinition, progress: UserProgress) -> bool:
    """Check if a badge's condition holds for the aggregate"""
    return condition_value(badge.condition, progress, badge.id) >= badge.condition.threshold


def check_and_award_badges(
    progress: UserProgress,
    catalog: Sequence[BadgeDefinition] = BADGE_CATALOG,
    now: Optional[datetime] = None
) -> List[BadgeDefinition]:
    """
    Unlock every badge newly satisfied by the aggregate

    Mutates the working copy: unlocked ids and their unlock timestamps are
    recorded. XP rewards are not applied here; the caller sums them and
    runs them through the XP system.

    Args:
        progress: Post-update aggregate
        catalog: Badge definitions in evaluation order
        now: Unlock timestamp (defaults to current UTC time)

    Returns:
        Newly unlocked badge definitions, in catalog order
    """
    unlocked_at = to_utc(now) if now else now_utc()
    newly_unlocked = []

    for badge in catalog:
        if badge.id in progress.unlocked_badge_ids:
            continue

        try:
            met = is_condition_met(badge, progress)
        except CatalogError:
            # Already logged on creation
            continue

        if met:
            progress.unlocked_badge_ids.add(badge.id)
            progress.badge_unlocked_at[badge.id] = unlocked_at
            newly_unlocked.append(badge)

            logger.info(
                f"User {progress.user_id} unlocked badge: {badge.id} "
                f"({badge.name}) +{badge.xp_reward} XP"
            )

    return newly_unlocked


def get_user_badges(progress: UserProgress) -> List[Dict[str, any]]:
    """
    Unlocked badges with details, most recent first

    Ids no longer present in the catalog are ignored.
    """
    unlocked = []
    for badge_id in progress.unlocked_badge_ids:
        badge = get_badge(badge_id)
        if badge is None:
            continue
        unlocked.append({
            "id": badge.id,
            "name": badge.name,
            "emoji": badge.emoji,
            "description": badge.description,
            "category": badge.category.value,
            "rarity": badge.rarity.value,
            "xp_reward": badge.xp_reward,
            "unlocked_at": progress.badge_unlocked_at.get(badge_id),
        })

    unlocked.sort(key=lambda b: b["unlocked_at"] or _EPOCH, reverse=True)
    return unlocked


def get_badge_progress(progress: UserProgress, badge: BadgeDefinition) -> Dict[str, any]:
    """
    Progress toward a badge

    Returns:
        {
            'current': int,
            'required': int,
            'percentage': int,
            'description': str
        }
    """
    required = badge.condition.threshold
    current = condition_value(badge.condition, progress, badge.id)
    percentage = min(100, int(current / required * 100)) if required > 0 else 100

    return {
        "current": current,
        "required": required,
        "percentage": percentage,
        "description": f"{current}/{required}",
    }


def get_badge_recommendations(
    progress: UserProgress,
    catalog: Sequence[BadgeDefinition] = BADGE_CATALOG,
    limit: int = 3
) -> List[Dict[str, any]]:
    """
    Locked badges closest to completion

    Args:
        progress: User's aggregate
        catalog: Badge definitions
        limit: Number of recommendations to return
    """
    locked = []
    for badge in catalog:
        if badge.id in progress.unlocked_badge_ids:
            continue
        try:
            badge_progress = get_badge_progress(progress, badge)
        except CatalogError:
            continue
        locked.append({"id": badge.id, "name": badge.name, "progress": badge_progress})

    locked.sort(key=lambda b: b["progress"]["percentage"], reverse=True)
    return locked[:limit]
