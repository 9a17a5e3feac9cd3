"""
Data models for streak-keeper.

Plans are produced externally (usually by the AI text parser) and consumed
read-only. Everything below the plan layer (dated days, statuses, streaks,
history entries, summaries) is derived on every query and never persisted.
Dates are carried as ISO strings (YYYY-MM-DD), the same form they take in
storage and in completion keys.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Literal

from .config import DAYS_PER_WEEK, MEAL_SLOTS, TRACKS

Track = Literal["workout", "diet"]
DayStatus = Literal["rest", "upcoming", "in_progress", "completed", "missed"]
RewardCategory = Literal["workout", "diet", "overall"]


@dataclass
class PlanItem:
    """
    One checkable entry in a day: an exercise or a meal.

    Exercises have no slot. Meals carry their slot (breakfast, lunch,
    dinner, snack), which is part of the completion identifier so the same
    dish eaten at two meals is tracked separately.
    """

    name: str
    slot: str | None = None
    calories: int = 0
    sets: int | None = None
    reps: str | None = None  # "8-12", "10", "45s" ...
    rest: str | None = None
    target_muscles: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate item data."""
        if not self.name or not self.name.strip():
            raise ValueError("item name must be non-empty")
        if self.slot is not None and self.slot not in MEAL_SLOTS:
            raise ValueError(f"slot must be one of {MEAL_SLOTS}, got {self.slot!r}")
        if self.calories < 0:
            raise ValueError("calories must be non-negative")
        if self.sets is not None and self.sets < 1:
            raise ValueError("sets must be >= 1")

    @property
    def item_id(self) -> str:
        """Identifier used in completion keys: the name, or '{slot}-{name}' for meals."""
        if self.slot is None:
            return self.name
        return f"{self.slot}-{self.name}"


@dataclass
class DayTemplate:
    """One slot of the 7-day weekly template."""

    is_rest_day: bool
    items: list[PlanItem] = field(default_factory=list)
    label: str = ""  # e.g. "Upper Body Strength"

    def __post_init__(self) -> None:
        if self.is_rest_day and self.items:
            raise ValueError("rest day cannot have items")


@dataclass
class Plan:
    """
    A multi-week workout or diet plan.

    weekly_template is indexed by a track-specific weekday convention:
    workout plans are Monday=0..Sunday=6, diet plans Sunday=0..Saturday=6.
    The active span is [start_date, start_date + total_weeks * 7 days).
    """

    track: Track
    goal: str
    start_date: str
    total_weeks: int
    weekly_template: list[DayTemplate]
    user_id: str | None = None
    duration: str = ""  # Display text from the generator, e.g. "12 weeks"
    target_calories: int | None = None
    water_intake: str | None = None

    def __post_init__(self) -> None:
        """Validate plan data."""
        if self.track not in TRACKS:
            raise ValueError(f"track must be one of {TRACKS}, got {self.track!r}")
        if self.total_weeks < 1:
            raise ValueError("total_weeks must be >= 1")
        if len(self.weekly_template) != DAYS_PER_WEEK:
            raise ValueError(
                f"weekly_template must have exactly {DAYS_PER_WEEK} days, "
                f"got {len(self.weekly_template)}"
            )
        # Raises ValueError on a malformed date
        date.fromisoformat(self.start_date)

    @property
    def start(self) -> date:
        return date.fromisoformat(self.start_date)

    @property
    def end(self) -> date:
        """First date after the active span."""
        return self.start + timedelta(days=self.total_weeks * DAYS_PER_WEEK)


@dataclass
class DatedDay:
    """A template day projected onto a concrete calendar date."""

    date: str
    template_index: int
    day_number: int  # 1 on the plan's start date, increasing without reset
    week_number: int
    is_rest_day: bool
    items: list[PlanItem] = field(default_factory=list)
    label: str = ""

    @property
    def weekday_name(self) -> str:
        return date.fromisoformat(self.date).strftime("%A")


@dataclass
class DayProgress:
    """Classification of a dated day against the completion log."""

    status: DayStatus
    percentage: float  # 0-100

    def __post_init__(self) -> None:
        if not 0 <= self.percentage <= 100:
            raise ValueError("percentage must be in [0, 100]")


@dataclass
class HistoryEntry:
    """One calendar day of the combined workout/diet timeline."""

    date: str
    workout_done: bool
    diet_done: bool

    @property
    def overall_done(self) -> bool:
        return self.workout_done and self.diet_done


@dataclass
class StreakSnapshot:
    """Current and longest streak for one track."""

    current: int = 0
    longest: int = 0


@dataclass
class WeeklyConsistency:
    """Done-day counts for the calendar week (Monday through today)."""

    workout: int = 0
    diet: int = 0
    overall: int = 0
    elapsed_days: int = 0

    @property
    def percentage(self) -> int:
        """Overall-done days as a share of elapsed days, rounded."""
        if self.elapsed_days == 0:
            return 0
        return round(self.overall / self.elapsed_days * 100)


@dataclass
class Achievement:
    """An unlocked achievement with the time it was first unlocked."""

    id: str
    title: str
    description: str
    icon: str
    category: RewardCategory
    unlocked_at: str  # ISO datetime


@dataclass
class Milestone:
    """Progress of a current streak against a fixed target."""

    target: int
    title: str
    category: RewardCategory
    achieved: bool


@dataclass
class PeriodStats:
    """Completion and calorie totals for one track over a date range."""

    start_date: str
    end_date: str
    items_completed: int = 0
    items_total: int = 0
    calories: int = 0  # Burned for workouts, consumed for diet

    @property
    def completion_rate(self) -> int:
        if self.items_total == 0:
            return 0
        return round(self.items_completed / self.items_total * 100)


@dataclass
class ProgressSummary:
    """
    Read-only, display-ready view of a user's progress.

    Produced fresh on every query; never persisted.
    """

    workout: StreakSnapshot = field(default_factory=StreakSnapshot)
    diet: StreakSnapshot = field(default_factory=StreakSnapshot)
    overall: StreakSnapshot = field(default_factory=StreakSnapshot)
    weekly: WeeklyConsistency = field(default_factory=WeeklyConsistency)
    monthly_consistency: int = 0
    total_active_days: int = 0
    history: list[HistoryEntry] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)
    milestones: list[Milestone] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "ProgressSummary":
        """All-zero summary used when there is no user, plan or readable data."""
        return cls()
