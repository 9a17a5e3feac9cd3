"""
Reward registry.

The achievement and milestone tables are loaded from the bundled
``src/streak_keeper/rewards.yaml`` at import time. If the table cannot be
loaded a RuntimeError is raised: progress summaries cannot be built
without it.
"""

from .base import AchievementRule, MilestoneRule


def _build_registry() -> tuple[list[AchievementRule], list[MilestoneRule]]:
    from .loader import load_rewards_from_yaml

    loaded = load_rewards_from_yaml()
    if not loaded or not loaded[0]:
        raise RuntimeError(
            "streak-keeper: no reward definitions could be loaded. "
            "Check that src/streak_keeper/rewards.yaml is present and valid."
        )
    return loaded


ACHIEVEMENT_RULES, MILESTONE_RULES = _build_registry()
