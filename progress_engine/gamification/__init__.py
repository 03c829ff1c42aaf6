"""
Gamification core for the progression engine

- Leveling curve (XP ↔ level)
- Calendar-day streak tracking
- XP awards for completed sessions
- Badge catalog and evaluation
- Aggregate store contract
"""

from progress_engine.gamification.leveling import (
    calculate_level,
    get_level_info,
    level_progress,
    xp_for_level,
    xp_to_next_level,
)
from progress_engine.gamification.streak_system import DayRelation, StreakUpdate, classify_day, update_streak
from progress_engine.gamification.xp_system import award_xp, apply_xp, get_session_xp_breakdown
from progress_engine.gamification.badge_catalog import BADGE_CATALOG, get_badge
from progress_engine.gamification.badge_system import check_and_award_badges, get_user_badges
from progress_engine.gamification.session_pipeline import apply_session_event
from progress_engine.gamification.progress_store import InMemoryProgressStore, ProgressStore

__all__ = [
    "calculate_level",
    "get_level_info",
    "level_progress",
    "xp_for_level",
    "xp_to_next_level",
    "DayRelation",
    "StreakUpdate",
    "classify_day",
    "update_streak",
    "award_xp",
    "apply_xp",
    "get_session_xp_breakdown",
    "BADGE_CATALOG",
    "get_badge",
    "check_and_award_badges",
    "get_user_badges",
    "apply_session_event",
    "InMemoryProgressStore",
    "ProgressStore",
]
