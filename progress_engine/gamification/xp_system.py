"""
XP and Leveling System

Computes the XP earned by a completed session and applies XP awards to the
per-user aggregate.

XP Award Rules (summed in this order):
- Time studied: floor(hours * XP_PER_HOUR), 10 XP/hour by default
- Session completed: 25 XP
- First session of the civil day: 25 XP
- Streak milestones: 7 days → 100 XP, 30 days → 500 XP (once per transition)
- Badge unlocks: the badge's xp_reward
"""

from typing import Dict, List, Optional
import logging

from progress_engine import config
from progress_engine.exceptions import ValidationError
from progress_engine.gamification.leveling import calculate_level
from progress_engine.models.progress import UserProgress

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600


def calculate_time_xp(duration_seconds: int, xp_per_hour: Optional[int] = None) -> int:
    """
    XP earned from time studied

    Example:
        >>> calculate_time_xp(3600)
        10
        >>> calculate_time_xp(5400)
        15
    """
    rate = config.XP_PER_HOUR if xp_per_hour is None else xp_per_hour
    return (duration_seconds * rate) // SECONDS_PER_HOUR


def get_session_xp_breakdown(
    duration_seconds: int,
    is_first_session_today: bool,
    milestone_streak: Optional[int] = None
) -> Dict[str, any]:
    """
    Itemized XP for one completed session

    Args:
        duration_seconds: Session length in seconds
        is_first_session_today: Streak tracker says this opens a new civil day
        milestone_streak: Streak length just reached, if it is a milestone

    Returns:
        {
            'total': int,
            'breakdown': [{'source': str, 'amount': int}, ...]
        }
    """
    breakdown: List[Dict[str, any]] = [
        {"source": "Time studied", "amount": calculate_time_xp(duration_seconds)},
        {"source": "Session completed", "amount": config.COMPLETION_BONUS_XP},
    ]

    if is_first_session_today:
        breakdown.append({"source": "First session today", "amount": config.FIRST_SESSION_OF_DAY_BONUS_XP})

    if milestone_streak is not None:
        bonus = config.STREAK_MILESTONE_BONUSES.get(milestone_streak)
        if bonus:
            breakdown.append({"source": f"{milestone_streak}-day streak milestone", "amount": bonus})

    return {
        "total": sum(item["amount"] for item in breakdown),
        "breakdown": breakdown,
    }


def award_xp(current_xp: int, amount: int) -> Dict[str, any]:
    """
    Add XP to a total and report level changes

    Pure: nothing is persisted.

    Returns:
        {
            'new_xp': int,
            'old_level': int,
            'new_level': int,
            'leveled_up': bool,
            'levels_gained': int
        }

    Example:
        >>> award_xp(0, 1000)["levels_gained"]
        3
    """
    if amount < 0:
        raise ValidationError(message="XP award must not be negative", field="amount", value=amount)

    old_level = calculate_level(current_xp)
    new_xp = current_xp + amount
    new_level = calculate_level(new_xp)

    return {
        "new_xp": new_xp,
        "old_level": old_level,
        "new_level": new_level,
        "leveled_up": new_level > old_level,
        "levels_gained": new_level - old_level,
    }


def apply_xp(progress: UserProgress, amount: int, reason: str = "Session completed") -> Dict[str, any]:
    """
    Apply an XP award to the working copy of the aggregate

    Args:
        progress: Aggregate being updated
        amount: XP to add (>= 0)
        reason: Human-readable description, for the log

    Returns:
        Result of award_xp()
    """
    result = award_xp(progress.xp, amount)
    progress.xp = result["new_xp"]

    logger.info(
        f"Awarded {amount} XP to user {progress.user_id} for {reason}. "
        f"Total: {result['new_xp']} XP, Level: {result['new_level']}"
    )
    if result["leveled_up"]:
        logger.info(
            f"User {progress.user_id} leveled up from {result['old_level']} to {result['new_level']}!"
        )

    return result
