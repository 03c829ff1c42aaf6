"""Progression engine: XP, levels, streaks and badges for completed work sessions"""

__version__ = "0.1.0"
