"""
Base types for reward definitions.

AchievementRule unlocks once the longest streak of its category reaches
the threshold. MilestoneRule is checked against the current streak.
"""

from dataclasses import dataclass

REWARD_CATEGORIES: tuple[str, ...] = ("workout", "diet", "overall")


@dataclass(frozen=True)
class AchievementRule:
    """One row of the fixed achievement table."""

    id: str              # e.g. "workout-week"
    title: str           # e.g. "Workout Warrior"
    description: str
    icon: str
    category: str        # "workout" | "diet" | "overall"
    threshold: int       # Longest-streak days required

    def is_unlocked(self, longest_streak: int) -> bool:
        return longest_streak >= self.threshold


@dataclass(frozen=True)
class MilestoneRule:
    """One target of the fixed milestone table."""

    category: str
    target: int          # Current-streak days required
    title: str
