"""User progress models"""
from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field


class UserProgress(BaseModel):
    """
    Per-user aggregate: XP, streak, counters and badge state

    Level is not stored; it is derived from xp on every access.
    `version` is the optimistic-concurrency counter (0 = never committed).
    """
    user_id: str
    xp: int = Field(default=0, ge=0)

    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: Optional[date] = None  # civil date in the reference timezone
    sessions_on_last_activity_day: int = 0

    total_duration_seconds: int = 0
    total_sessions: int = 0
    longest_session_seconds: int = 0
    first_session_of_day_count: int = 0
    sessions_before_noon_count: int = 0
    sessions_after_midnight_count: int = 0
    sessions_after_11pm_count: int = 0
    activity_type_set: set[str] = Field(default_factory=set)

    unlocked_badge_ids: set[str] = Field(default_factory=set)
    badge_unlocked_at: dict[str, datetime] = Field(default_factory=dict)

    first_session_at: Optional[datetime] = None
    last_session_at: Optional[datetime] = None

    version: int = 0

    @property
    def level(self) -> int:
        from progress_engine.gamification.leveling import calculate_level
        return calculate_level(self.xp)


class SessionEvent(BaseModel):
    """Completed work session, as reported by the session-lifecycle collaborator"""
    user_id: str
    duration_seconds: int
    completed_at: datetime  # must be timezone-aware
    activity_label: Optional[str] = None


class XPBreakdownItem(BaseModel):
    """One line of an itemized XP award"""
    source: str
    amount: int


class ProgressResult(BaseModel):
    """Outcome of processing one session event"""
    user_id: str
    xp_gained: int
    session_xp: int
    badge_xp: int
    old_level: int
    new_level: int
    leveled_up: bool
    levels_gained: int
    total_xp: int
    current_streak: int
    longest_streak: int
    day_relation: str
    streak_milestone: Optional[int] = None
    newly_unlocked_badge_ids: list[str] = Field(default_factory=list)
    xp_breakdown: list[XPBreakdownItem] = Field(default_factory=list)
