"""
Leveling Curve

Cumulative XP required for level N: floor(100 * N^1.5), level 1 at 0 XP.

Example progression:
- Level 1:  0 XP
- Level 2:  282 XP
- Level 5:  1,118 XP
- Level 10: 3,162 XP
- Level 50: 35,355 XP
- Level 100: 100,000 XP (max level)

The inverse (calculate_level) is reconciled against the forward formula with
exact integer comparisons, so calculate_level(xp_for_level(L)) == L for every
level in range.
"""

import math
from typing import Dict

BASE_XP = 100
EXPONENT = 1.5
MIN_LEVEL = 1
MAX_LEVEL = 100


def xp_for_level(level: int) -> int:
    """
    Total XP required to reach a level

    floor(100 * L^1.5) == isqrt(100^2 * L^3), computed in integers to
    avoid float rounding at perfect squares.

    Example:
        >>> xp_for_level(1)
        0
        >>> xp_for_level(2)
        282
        >>> xp_for_level(100)
        100000
    """
    if level <= MIN_LEVEL:
        return 0
    level = min(level, MAX_LEVEL)
    return math.isqrt(BASE_XP * BASE_XP * level ** 3)


# Low-XP floor: anything below the level-2 threshold is level 1
LEVEL_2_THRESHOLD = xp_for_level(2)


def calculate_level(xp: int) -> int:
    """
    Current level for a total XP amount, clamped to [1, 100]

    Largest level L with xp_for_level(L) <= xp. The float inverse
    (xp / 100)^(2/3) only seeds the search.
    """
    if xp < LEVEL_2_THRESHOLD:
        return MIN_LEVEL

    estimate = int((xp / BASE_XP) ** (1 / EXPONENT))
    level = max(MIN_LEVEL, min(MAX_LEVEL, estimate))

    while level < MAX_LEVEL and xp_for_level(level + 1) <= xp:
        level += 1
    while level > MIN_LEVEL and xp_for_level(level) > xp:
        level -= 1

    return level


def xp_to_next_level(xp: int) -> int:
    """XP still needed for the next level; 0 only at the level cap"""
    level = calculate_level(xp)
    if level >= MAX_LEVEL:
        return 0
    return xp_for_level(level + 1) - max(xp, 0)


def level_progress(xp: int) -> float:
    """
    Percentage progress from the current level's floor to the next threshold

    Returns:
        Value in [0, 100]; 100 at the level cap
    """
    level = calculate_level(xp)
    if level >= MAX_LEVEL:
        return 100.0

    floor_xp = xp_for_level(level)
    next_xp = xp_for_level(level + 1)
    progress = (xp - floor_xp) / (next_xp - floor_xp) * 100

    return min(100.0, max(0.0, progress))


def get_level_info(xp: int) -> Dict[str, any]:
    """
    Level summary for a total XP amount

    Returns:
        {
            'current_level': int,
            'xp_in_current_level': int,
            'xp_to_next_level': int,
            'total_xp_for_next_level': int,
            'progress_percent': float
        }
    """
    level = calculate_level(xp)
    floor_xp = xp_for_level(level)
    next_xp = xp_for_level(level + 1) if level < MAX_LEVEL else floor_xp

    return {
        "current_level": level,
        "xp_in_current_level": max(xp, 0) - floor_xp,
        "xp_to_next_level": xp_to_next_level(xp),
        "total_xp_for_next_level": next_xp,
        "progress_percent": round(level_progress(xp), 2),
    }
