"""
Badge Definitions - All badges available in the system

Badges unlock automatically when a user's aggregate satisfies the condition.
The catalog is built once at import and is read-only afterwards.

Categories:
- milestone: Session count
- time: Total hours studied
- streak: Consecutive days
- diversity: Activity variety
- intensity: Long sessions and busy days
- schedule: Time of day a session starts
- level: Level reached
- meta: Badges about badges
"""

from typing import Iterable, List, Optional, Tuple

from progress_engine.models.badge import (
    BadgeCategory,
    BadgeDefinition,
    BadgeRarity,
    CustomPredicate,
    FieldThreshold,
    SetCardinality,
)

HOUR = 3600


def _badge(id, name, emoji, description, category, rarity, xp_reward, order, condition) -> BadgeDefinition:
    return BadgeDefinition(
        id=id,
        name=name,
        emoji=emoji,
        description=description,
        category=category,
        rarity=rarity,
        xp_reward=xp_reward,
        order=order,
        condition=condition,
    )


_DEFINITIONS: List[BadgeDefinition] = [
    # ===== MILESTONE BADGES (Session Count) =====
    _badge("first_steps", "First Steps", "🎯", "Complete your first session",
           BadgeCategory.MILESTONE, BadgeRarity.COMMON, 50, 1,
           FieldThreshold(field_name="total_sessions", threshold=1)),
    _badge("veteran", "Veteran", "🌟", "Complete 50 sessions",
           BadgeCategory.MILESTONE, BadgeRarity.RARE, 200, 3,
           FieldThreshold(field_name="total_sessions", threshold=50)),

    # ===== TIME BADGES (Total Hours) =====
    _badge("getting_started", "Getting Started", "⏱️", "Study for 10 hours total",
           BadgeCategory.TIME, BadgeRarity.COMMON, 50, 10,
           FieldThreshold(field_name="total_duration_seconds", threshold=10 * HOUR)),
    _badge("academic", "Academic", "🎓", "Study for 25 hours total",
           BadgeCategory.TIME, BadgeRarity.COMMON, 75, 10.5,
           FieldThreshold(field_name="total_duration_seconds", threshold=25 * HOUR)),
    _badge("dedicated", "Dedicated", "⭐", "Study for 50 hours total",
           BadgeCategory.TIME, BadgeRarity.COMMON, 100, 11,
           FieldThreshold(field_name="total_duration_seconds", threshold=50 * HOUR)),
    _badge("centurion", "Centurion", "💯", "Study for 100 hours total",
           BadgeCategory.TIME, BadgeRarity.RARE, 200, 12,
           FieldThreshold(field_name="total_duration_seconds", threshold=100 * HOUR)),
    _badge("committed", "Committed", "🕐", "Study for 250 hours total",
           BadgeCategory.TIME, BadgeRarity.RARE, 300, 13,
           FieldThreshold(field_name="total_duration_seconds", threshold=250 * HOUR)),
    _badge("scholar", "Scholar", "📚", "Study for 500 hours total",
           BadgeCategory.TIME, BadgeRarity.EPIC, 500, 14,
           FieldThreshold(field_name="total_duration_seconds", threshold=500 * HOUR)),
    _badge("master", "Master", "🧙", "Study for 1000 hours total",
           BadgeCategory.TIME, BadgeRarity.EPIC, 1000, 15,
           FieldThreshold(field_name="total_duration_seconds", threshold=1000 * HOUR)),
    _badge("grandmaster", "Grandmaster", "👑", "Study for 2500 hours total",
           BadgeCategory.TIME, BadgeRarity.LEGENDARY, 2500, 16,
           FieldThreshold(field_name="total_duration_seconds", threshold=2500 * HOUR)),
    _badge("legend", "Legend", "🏆", "Study for 5000 hours total",
           BadgeCategory.TIME, BadgeRarity.LEGENDARY, 5000, 17,
           FieldThreshold(field_name="total_duration_seconds", threshold=5000 * HOUR)),

    # ===== STREAK BADGES (Consecutive Days) =====
    _badge("hot_streak", "Hot Streak", "🔥", "Maintain a 3-day streak",
           BadgeCategory.STREAK, BadgeRarity.COMMON, 50, 20,
           FieldThreshold(field_name="current_streak", threshold=3)),
    _badge("on_fire", "On Fire", "🔥", "Maintain a 7-day streak",
           BadgeCategory.STREAK, BadgeRarity.COMMON, 100, 21,
           FieldThreshold(field_name="current_streak", threshold=7)),
    _badge("blazing", "Blazing", "🔥", "Maintain a 14-day streak",
           BadgeCategory.STREAK, BadgeRarity.RARE, 200, 22,
           FieldThreshold(field_name="current_streak", threshold=14)),
    _badge("unstoppable", "Unstoppable", "💫", "Maintain a 30-day streak",
           BadgeCategory.STREAK, BadgeRarity.RARE, 300, 23,
           FieldThreshold(field_name="current_streak", threshold=30)),
    _badge("relentless", "Relentless", "⭐", "Maintain a 60-day streak",
           BadgeCategory.STREAK, BadgeRarity.EPIC, 500, 24,
           FieldThreshold(field_name="current_streak", threshold=60)),
    _badge("phenomenal", "Phenomenal", "🌟", "Maintain a 90-day streak",
           BadgeCategory.STREAK, BadgeRarity.EPIC, 750, 25,
           FieldThreshold(field_name="current_streak", threshold=90)),
    _badge("immortal", "Immortal", "💎", "Maintain a 180-day streak",
           BadgeCategory.STREAK, BadgeRarity.LEGENDARY, 1500, 26,
           FieldThreshold(field_name="current_streak", threshold=180)),
    _badge("eternal", "Eternal", "♾️", "Maintain a 365-day streak",
           BadgeCategory.STREAK, BadgeRarity.LEGENDARY, 3650, 27,
           FieldThreshold(field_name="current_streak", threshold=365)),

    # ===== DIVERSITY BADGES (Activity Variety) =====
    _badge("explorer", "Explorer", "🎨", "Try 3 different activity types",
           BadgeCategory.DIVERSITY, BadgeRarity.COMMON, 50, 30,
           SetCardinality(field_name="activity_type_set", threshold=3)),
    _badge("versatile", "Versatile", "🌈", "Try 7 different activity types",
           BadgeCategory.DIVERSITY, BadgeRarity.RARE, 100, 31,
           SetCardinality(field_name="activity_type_set", threshold=7)),
    _badge("renaissance", "Renaissance", "🎭", "Try 15 different activity types",
           BadgeCategory.DIVERSITY, BadgeRarity.EPIC, 250, 32,
           SetCardinality(field_name="activity_type_set", threshold=15)),

    # ===== INTENSITY BADGES (Long Sessions, Busy Days) =====
    _badge("power_hour", "Power Hour", "⚡", "Complete a 2-hour session",
           BadgeCategory.INTENSITY, BadgeRarity.COMMON, 75, 39,
           CustomPredicate(predicate="single_session_duration", threshold=2 * HOUR)),
    _badge("marathon", "Marathon", "💪", "Complete a 4-hour session",
           BadgeCategory.INTENSITY, BadgeRarity.RARE, 150, 40,
           CustomPredicate(predicate="single_session_duration", threshold=4 * HOUR)),
    _badge("deep_focus", "Deep Focus", "🎯", "Complete a 6-hour session",
           BadgeCategory.INTENSITY, BadgeRarity.RARE, 225, 40.5,
           CustomPredicate(predicate="single_session_duration", threshold=6 * HOUR)),
    _badge("ultra_marathon", "Ultra Marathon", "🏃", "Complete an 8-hour session",
           BadgeCategory.INTENSITY, BadgeRarity.EPIC, 300, 41,
           CustomPredicate(predicate="single_session_duration", threshold=8 * HOUR)),
    _badge("iron_will", "Iron Will", "🦾", "Complete a 12-hour session",
           BadgeCategory.INTENSITY, BadgeRarity.LEGENDARY, 500, 42,
           CustomPredicate(predicate="single_session_duration", threshold=12 * HOUR)),
    _badge("speed_demon", "Speed Demon", "⚡", "Complete 5 sessions in one day",
           BadgeCategory.INTENSITY, BadgeRarity.RARE, 100, 43,
           CustomPredicate(predicate="sessions_in_one_day", threshold=5)),

    # ===== SCHEDULE BADGES (Time of Day) =====
    _badge("early_bird", "Early Bird", "🐦", "Start 5 sessions before noon",
           BadgeCategory.SCHEDULE, BadgeRarity.RARE, 100, 50,
           CustomPredicate(predicate="sessions_before_noon", threshold=5)),
    _badge("night_owl", "Night Owl", "🦉", "Start a session after 11 PM",
           BadgeCategory.SCHEDULE, BadgeRarity.RARE, 100, 51,
           CustomPredicate(predicate="sessions_after_11pm", threshold=1)),
    _badge("midnight_grinder", "Midnight Grinder", "🌙", "Start a session between midnight and 5 AM",
           BadgeCategory.SCHEDULE, BadgeRarity.RARE, 100, 57,
           CustomPredicate(predicate="sessions_after_midnight", threshold=1)),

    # ===== LEVEL BADGES =====
    _badge("level_5", "Rising Star", "🌠", "Reach level 5",
           BadgeCategory.LEVEL, BadgeRarity.COMMON, 100, 60,
           FieldThreshold(field_name="level", threshold=5)),
    _badge("level_10", "Achiever", "🎖️", "Reach level 10",
           BadgeCategory.LEVEL, BadgeRarity.COMMON, 200, 61,
           FieldThreshold(field_name="level", threshold=10)),
    _badge("level_25", "Elite", "💎", "Reach level 25",
           BadgeCategory.LEVEL, BadgeRarity.RARE, 500, 62,
           FieldThreshold(field_name="level", threshold=25)),
    _badge("level_35", "Pro", "🚀", "Reach level 35",
           BadgeCategory.LEVEL, BadgeRarity.RARE, 750, 62.5,
           FieldThreshold(field_name="level", threshold=35)),
    _badge("level_50", "Champion", "🏅", "Reach level 50",
           BadgeCategory.LEVEL, BadgeRarity.EPIC, 1000, 63,
           FieldThreshold(field_name="level", threshold=50)),
    _badge("level_100", "Transcendent", "✨", "Reach level 100",
           BadgeCategory.LEVEL, BadgeRarity.LEGENDARY, 2500, 64,
           FieldThreshold(field_name="level", threshold=100)),

    # ===== META BADGES =====
    _badge("collector", "Collector", "🏆", "Unlock 10 badges",
           BadgeCategory.META, BadgeRarity.RARE, 250, 70,
           SetCardinality(field_name="unlocked_badge_ids", threshold=10)),
]


def validate_catalog(definitions: Iterable[BadgeDefinition]) -> Tuple[BadgeDefinition, ...]:
    """
    Freeze a catalog into evaluation order

    Sorted by (order, id). Duplicate ids are rejected.

    Raises:
        ValueError: On a duplicate badge id
    """
    definitions = list(definitions)
    seen = set()
    for badge in definitions:
        if badge.id in seen:
            raise ValueError(f"Duplicate badge id in catalog: {badge.id}")
        seen.add(badge.id)

    return tuple(sorted(definitions, key=lambda b: (b.order, b.id)))


BADGE_CATALOG: Tuple[BadgeDefinition, ...] = validate_catalog(_DEFINITIONS)


def get_badge(badge_id: str) -> Optional[BadgeDefinition]:
    """
    Get a badge by its ID

    Example:
        >>> get_badge("first_steps").name
        'First Steps'
    """
    return next((b for b in BADGE_CATALOG if b.id == badge_id), None)


def get_badges_by_category(category: BadgeCategory) -> List[BadgeDefinition]:
    """Get all badges in a category, in evaluation order"""
    return [b for b in BADGE_CATALOG if b.category == category]


def get_all_badges() -> Tuple[BadgeDefinition, ...]:
    """Get the complete catalog"""
    return BADGE_CATALOG
