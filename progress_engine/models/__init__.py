"""Pydantic models for the progression engine"""
from progress_engine.models.badge import (
    BadgeCategory,
    BadgeCondition,
    BadgeDefinition,
    BadgeRarity,
    CustomPredicate,
    FieldThreshold,
    SetCardinality,
)
from progress_engine.models.progress import ProgressResult, SessionEvent, UserProgress, XPBreakdownItem

__all__ = [
    "BadgeCategory",
    "BadgeCondition",
    "BadgeDefinition",
    "BadgeRarity",
    "CustomPredicate",
    "FieldThreshold",
    "SetCardinality",
    "ProgressResult",
    "SessionEvent",
    "UserProgress",
    "XPBreakdownItem",
]
