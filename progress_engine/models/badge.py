"""Badge models for gamification"""
from enum import Enum
from typing import Annotated, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


class BadgeCategory(str, Enum):
    """Badge categories"""
    MILESTONE = "milestone"
    TIME = "time"
    STREAK = "streak"
    DIVERSITY = "diversity"
    INTENSITY = "intensity"
    SCHEDULE = "schedule"
    LEVEL = "level"
    META = "meta"


class BadgeRarity(str, Enum):
    """Badge rarity/difficulty levels"""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class FieldThreshold(BaseModel):
    """Numeric aggregate field must reach a threshold"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["field_threshold"] = "field_threshold"
    field_name: str
    threshold: int


class SetCardinality(BaseModel):
    """Number of distinct elements in a set field must reach a threshold"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_cardinality"] = "set_cardinality"
    field_name: str
    threshold: int


class CustomPredicate(BaseModel):
    """Named predicate over the aggregate, parameterized by a threshold"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["custom_predicate"] = "custom_predicate"
    predicate: Literal[
        "sessions_in_one_day",
        "single_session_duration",
        "sessions_before_noon",
        "sessions_after_midnight",
        "sessions_after_11pm",
    ]
    threshold: int


BadgeCondition = Annotated[
    Union[FieldThreshold, SetCardinality, CustomPredicate],
    Field(discriminator="kind"),
]


class BadgeDefinition(BaseModel):
    """Badge definition (immutable catalog entry)"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    emoji: str
    description: str
    category: BadgeCategory
    rarity: BadgeRarity
    xp_reward: int = Field(ge=0)
    order: float
    condition: BadgeCondition
