"""
Progress tracker: storage-backed entry point to the progress engine.

Reads plans and completion logs for the current user, runs the pure core
functions, and records completions. Plans are cached with a TTL; the
completion log is re-read on every query so aggregates are never stale.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime

from .core.cache import TTLCache
from .core.calendar import (
    current_month_number,
    current_week_number,
    dated_day,
    month_date_range,
    plan_progress_percentage,
    project_week,
    week_date_range,
)
from .core.completion import completion_key
from .core.config import DIET_PLAN_CACHE_TTL_S, WORKOUT_PLAN_CACHE_TTL_S
from .core.models import DatedDay, DayProgress, PeriodStats, Plan, ProgressSummary
from .core.progress import TrackLog, build_summary, period_stats
from .core.status import classify_day, completion_percentage, meets_threshold
from .io.accounts import set_current_user_id
from .io.progress_store import ProgressStore
from .io.serializers import ValidationError, validate_date, validate_track
from .io.storage import StorageError

logger = logging.getLogger(__name__)

DEFAULT_PLAN_TTLS: dict[str, float] = {
    "workout": WORKOUT_PLAN_CACHE_TTL_S,
    "diet": DIET_PLAN_CACHE_TTL_S,
}


class ProgressTracker:
    """
    Per-process facade over a ProgressStore.

    Args:
        store: Persistence for the current user's plans and logs
        cache: Plan cache; one is created when omitted
        clock: Returns the current local datetime; injected for tests
        plan_ttls: Cache TTL per track in seconds
    """

    def __init__(
        self,
        store: ProgressStore,
        cache: TTLCache | None = None,
        clock: Callable[[], datetime] = datetime.now,
        plan_ttls: dict[str, float] | None = None,
    ):
        self.store = store
        self.cache = cache if cache is not None else TTLCache()
        self.clock = clock
        self.plan_ttls = dict(DEFAULT_PLAN_TTLS if plan_ttls is None else plan_ttls)

    def today(self) -> date:
        return self.clock().date()

    def current_user_id(self) -> str | None:
        return self.store.current_user_id()

    # ------------------------------------------------------------------
    # Plans
    # ------------------------------------------------------------------

    def _plan_cache_key(self, track: str) -> str:
        return f"{self.current_user_id()}:{track}"

    def load_plan(self, track: str) -> Plan | None:
        """The current user's plan for a track, served from cache within the TTL."""
        validate_track(track)
        if self.current_user_id() is None:
            return None
        return self.cache.get_or_load(
            self._plan_cache_key(track),
            lambda: self.store.load_plan(track),
            self.plan_ttls.get(track),
        )

    def save_plan(self, plan: Plan) -> None:
        self.store.save_plan(plan)
        self.cache.invalidate(self._plan_cache_key(plan.track))

    def reset_plan(self, track: str) -> None:
        """Remove a track's plan, completion log and day markers."""
        self.store.reset_plan(track)
        self.cache.invalidate(self._plan_cache_key(track))

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def switch_user(self, user_id: str) -> None:
        """Sign in as user_id. Logs stay namespaced per user and are never merged."""
        set_current_user_id(self.store.storage, user_id)
        self.cache.invalidate()

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_completion(self, track: str, day_date: str, item_id: str) -> bool:
        """
        Mark one item done on a date.

        The day is added to the track's completed-day markers once its live
        percentage reaches the completion threshold.

        Args:
            track: "workout" or "diet"
            day_date: ISO date the item was done
            item_id: Exercise name, or "{slot}-{meal name}"

        Returns:
            True if newly recorded, False if already logged

        Raises:
            ValidationError: If no user is signed in, no plan exists, the
                date is invalid or outside the plan, or item_id is not on
                that day
        """
        validate_track(track)
        validate_date(day_date)
        if self.current_user_id() is None:
            raise ValidationError("No user signed in. Run 'login' first.")

        plan = self.load_plan(track)
        if plan is None:
            raise ValidationError(f"No {track} plan found. Import one first.")

        d = date.fromisoformat(day_date)
        if not plan.start <= d < plan.end:
            raise ValidationError(
                f"{day_date} is outside the plan ({plan.start_date} to {plan.end.isoformat()})"
            )

        day = dated_day(plan, d)
        if day.is_rest_day:
            raise ValidationError(f"{day_date} is a rest day")
        valid_ids = [item.item_id for item in day.items]
        if item_id not in valid_ids:
            raise ValidationError(
                f"'{item_id}' is not planned on {day_date}. Planned: {', '.join(valid_ids) or 'nothing'}"
            )

        added = self.store.add_completion(track, completion_key(day_date, item_id))
        if meets_threshold(completion_percentage(day, self.store.load_completions(track))):
            self.store.mark_day_completed(track, day_date)
        return added

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def week_view(
        self,
        track: str,
        completed_items: set[str] | None = None,
    ) -> list[tuple[DatedDay, DayProgress]]:
        """
        The relevant plan week with each day's status.

        Args:
            track: "workout" or "diet"
            completed_items: Completion log already read by the caller;
                loaded from the store when omitted

        Returns:
            (day, progress) pairs; empty when there is no user or no plan
        """
        plan = self.load_plan(track)
        if plan is None:
            return []

        today = self.today()
        if completed_items is None:
            completed_items = self.store.load_completions(track)
        completed_dates = self.store.load_completed_days(track)
        return [
            (day, classify_day(day, completed_dates, completed_items, today, plan.start))
            for day in project_week(plan, today)
        ]

    def plan_position(self, track: str) -> tuple[int, int, int] | None:
        """(current week, total weeks, progress %) for a track, or None without a plan."""
        plan = self.load_plan(track)
        if plan is None:
            return None
        today = self.today()
        return (
            current_week_number(plan, today),
            plan.total_weeks,
            plan_progress_percentage(plan, today),
        )

    def summary(self) -> ProgressSummary:
        """
        Full progress summary for the current user.

        Never raises: with no user, or if storage cannot be read, an empty
        summary is returned and the failure is logged.
        """
        try:
            if self.current_user_id() is None:
                return ProgressSummary.empty()

            now = self.clock()
            stored_ledger = self.store.load_unlocks()
            summary, ledger = build_summary(
                TrackLog(self.load_plan("workout"), self.store.load_completions("workout")),
                TrackLog(self.load_plan("diet"), self.store.load_completions("diet")),
                today=now.date(),
                now=now,
                unlock_ledger=stored_ledger,
            )
            if ledger != stored_ledger:
                self.store.save_unlocks(ledger)
            return summary
        except (StorageError, ValidationError, ValueError) as e:
            logger.warning(f"Could not build progress summary: {e}")
            return ProgressSummary.empty()

    def period_stats(
        self,
        track: str,
        period: str = "week",
        number: int | None = None,
    ) -> PeriodStats | None:
        """
        Completion and calorie totals for a plan week or calendar month.

        Args:
            track: "workout" or "diet"
            period: "week" or "month"
            number: 1-based period number; defaults to the current one

        Returns:
            PeriodStats, or None without a plan

        Raises:
            ValidationError: If period is not "week" or "month"
        """
        plan = self.load_plan(track)
        if plan is None:
            return None

        today = self.today()
        if period == "week":
            start, end = week_date_range(plan, number or current_week_number(plan, today))
        elif period == "month":
            start, end = month_date_range(plan, number or current_month_number(plan, today))
        else:
            raise ValidationError(f"Invalid period: {period}. Must be 'week' or 'month'")

        return period_stats(plan, self.store.load_completions(track), start, end)

    def clear(self) -> None:
        """Wipe the current user's completion logs and unlock ledger."""
        self.store.clear_progress()
