"""
Reward definitions for streak-keeper.

Achievements and milestones are fixed threshold tables evaluated against
streak values by the progress engine.
"""

from .base import AchievementRule, MilestoneRule
from .registry import ACHIEVEMENT_RULES, MILESTONE_RULES

__all__ = [
    "AchievementRule",
    "MilestoneRule",
    "ACHIEVEMENT_RULES",
    "MILESTONE_RULES",
]
