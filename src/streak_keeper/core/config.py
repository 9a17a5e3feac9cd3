"""
Configuration constants for the progress and streak model.

All policy values are centralized here. The achievement and milestone
tables are data, not policy, and live in the bundled rewards.yaml.
"""

import math
from typing import Final

# =============================================================================
# DAY COMPLETION
# =============================================================================

# A past day counts as done once this share of its items is checked off.
# Applies identically to workout exercises and diet meals.
COMPLETION_THRESHOLD_PCT: Final[float] = 50.0

# =============================================================================
# HISTORY AND CONSISTENCY WINDOWS
# =============================================================================

HISTORY_FALLBACK_DAYS: Final[int] = 60  # Trailing window when no plan exists
MONTHLY_WINDOW_DAYS: Final[int] = 30  # Trailing entries for monthly consistency

# =============================================================================
# PLAN DEFAULTS
# =============================================================================

DAYS_PER_WEEK: Final[int] = 7
DEFAULT_TOTAL_WEEKS: Final[int] = 12

TRACKS: Final[tuple[str, ...]] = ("workout", "diet")

MEAL_SLOTS: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner", "snack")

# =============================================================================
# PLAN DURATION (weight-change goals)
# =============================================================================

WEIGHT_LOSS_KG_PER_WEEK: Final[float] = 0.3
WEIGHT_GAIN_KG_PER_WEEK: Final[float] = 0.2
MIN_PLAN_WEEKS: Final[int] = 16
MAX_PLAN_WEEKS: Final[int] = 52
MIN_WEIGHT_DELTA_KG: Final[float] = 2.0  # Below this a weight goal gets MIN_PLAN_WEEKS
MIN_VALID_WEIGHT_KG: Final[float] = 30.0
MAX_VALID_WEIGHT_KG: Final[float] = 200.0

FITNESS_GOAL_KEYWORDS: Final[tuple[str, ...]] = ("fitness", "training", "endurance", "improve")

# =============================================================================
# CACHING
# =============================================================================

WORKOUT_PLAN_CACHE_TTL_S: Final[float] = 300.0
DIET_PLAN_CACHE_TTL_S: Final[float] = 1800.0


def is_valid_weight(weight_kg: float | None) -> bool:
    """Return True if weight_kg is a plausible adult bodyweight."""
    if weight_kg is None:
        return False
    return MIN_VALID_WEIGHT_KG <= weight_kg <= MAX_VALID_WEIGHT_KG


def calculate_plan_weeks(
    goal: str,
    current_weight_kg: float | None = None,
    target_weight_kg: float | None = None,
) -> int:
    """
    Recommend a plan length in weeks for a goal.

    Weight-change goals are sized from the weight delta at a sustainable
    weekly rate (0.3 kg/week loss, 0.2 kg/week gain) and clamped to
    [MIN_PLAN_WEEKS, MAX_PLAN_WEEKS]. General fitness goals get a full year,
    maintenance gets the minimum, and anything else the default.

    Args:
        goal: Free-form goal text, e.g. "Lose fat" or "Build muscle"
        current_weight_kg: Current bodyweight, if known
        target_weight_kg: Target bodyweight, if known

    Returns:
        Plan length in weeks
    """
    goal_lc = goal.lower()

    is_loss = "lose" in goal_lc or "fat" in goal_lc
    is_gain = "gain" in goal_lc or "muscle" in goal_lc

    if (is_loss or is_gain) and is_valid_weight(current_weight_kg) and is_valid_weight(target_weight_kg):
        delta = abs(target_weight_kg - current_weight_kg)  # type: ignore[operator]
        if delta < MIN_WEIGHT_DELTA_KG:
            return MIN_PLAN_WEEKS
        rate = WEIGHT_LOSS_KG_PER_WEEK if is_loss else WEIGHT_GAIN_KG_PER_WEEK
        weeks = math.ceil(round(delta / rate, 6))
        return max(MIN_PLAN_WEEKS, min(MAX_PLAN_WEEKS, weeks))

    if any(keyword in goal_lc for keyword in FITNESS_GOAL_KEYWORDS):
        return MAX_PLAN_WEEKS
    if "maintain" in goal_lc:
        return MIN_PLAN_WEEKS
    return DEFAULT_TOTAL_WEEKS


def format_duration(weeks: int) -> str:
    """Render a plan length as 'N months' when it divides evenly, else 'N weeks'."""
    if weeks >= 8 and weeks % 4 == 0:
        return f"{weeks // 4} months"
    return f"{weeks} weeks" if weeks != 1 else "1 week"
