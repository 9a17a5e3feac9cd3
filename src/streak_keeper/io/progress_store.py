"""
Per-user persistence of plans, completion logs and the unlock ledger.

Everything is stored as JSON strings in a KeyValueStorage under
user-namespaced keys (see accounts.user_cache_key). Unreadable or foreign
payloads are logged and treated as absent; they never propagate.
"""

import json
import logging
from pathlib import Path
from typing import Any

from ..core.engine.config_loader import get_store_path
from ..core.models import Plan
from .accounts import get_current_user_id, user_cache_key, validate_cached_data
from .serializers import ValidationError, dict_to_plan, plan_to_dict, validate_track
from .storage import JsonFileStorage, KeyValueStorage

logger = logging.getLogger(__name__)

PLAN_KEYS: dict[str, str] = {
    "workout": "cached_workout_plan",
    "diet": "cached_diet_plan",
}

COMPLETED_ITEM_KEYS: dict[str, str] = {
    "workout": "completed_exercises",
    "diet": "completed_meals",
}

COMPLETED_DAY_KEYS: dict[str, str] = {
    "workout": "completed_workout_days",
    "diet": "completed_diet_days",
}

UNLOCKS_KEY = "achievement_unlocks"


class ProgressStore:
    """
    Manages one storage backend on behalf of the current user.

    Every method reads the current user id from storage first, so a user
    switch made by another process takes effect immediately.
    """

    def __init__(self, storage: KeyValueStorage):
        """
        Initialize the progress store.

        Args:
            storage: Backend holding all keys
        """
        self.storage = storage

    def current_user_id(self) -> str | None:
        return get_current_user_id(self.storage)

    def _key(self, base_key: str) -> str:
        return user_cache_key(base_key, self.current_user_id())

    def _load_json(self, base_key: str) -> Any:
        """Decode the payload under base_key; None if missing or corrupt."""
        key = self._key(base_key)
        raw = self.storage.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding corrupt value under {key}: {e}")
            return None

    def _save_json(self, base_key: str, value: Any) -> None:
        self.storage.set(self._key(base_key), json.dumps(value, ensure_ascii=False))

    def _load_string_set(self, base_key: str) -> set[str]:
        data = self._load_json(base_key)
        if data is None:
            return set()
        if not isinstance(data, list):
            logger.warning(f"Expected a list under {self._key(base_key)}; ignoring")
            return set()
        return {str(v) for v in data}

    # ------------------------------------------------------------------
    # Plans
    # ------------------------------------------------------------------

    def load_plan(self, track: str) -> Plan | None:
        """
        Load the current user's plan for a track.

        Returns:
            Plan, or None if absent, unreadable or owned by another user
        """
        validate_track(track)
        user_id = self.current_user_id()
        if user_id is None:
            return None

        data = self._load_json(PLAN_KEYS[track])
        if data is None:
            return None

        if not validate_cached_data(data, user_id):
            logger.warning(
                f"Cached {track} plan belongs to user {data.get('user_id')!r}, "
                f"not {user_id!r}; discarding"
            )
            self.storage.remove(self._key(PLAN_KEYS[track]))
            return None

        try:
            return dict_to_plan(data)
        except ValidationError as e:
            logger.warning(f"Invalid cached {track} plan: {e}")
            return None

    def save_plan(self, plan: Plan) -> None:
        """
        Store a plan for the current user, stamping it with the owner id.

        Raises:
            ValidationError: If nobody is signed in
        """
        user_id = self.current_user_id()
        if user_id is None:
            raise ValidationError("No user signed in. Run 'login' first.")
        plan.user_id = user_id
        self._save_json(PLAN_KEYS[plan.track], plan_to_dict(plan))

    # ------------------------------------------------------------------
    # Completion log
    # ------------------------------------------------------------------

    def load_completions(self, track: str) -> set[str]:
        """Completion keys ("{date}-{item_id}") logged for a track."""
        validate_track(track)
        if self.current_user_id() is None:
            return set()
        return self._load_string_set(COMPLETED_ITEM_KEYS[track])

    def add_completion(self, track: str, key: str) -> bool:
        """
        Append a completion key if it is not already logged.

        Returns:
            True if the key was added, False if it was already present
        """
        validate_track(track)
        keys = self._load_string_set(COMPLETED_ITEM_KEYS[track])
        if key in keys:
            return False
        keys.add(key)
        self._save_json(COMPLETED_ITEM_KEYS[track], sorted(keys))
        return True

    def load_completed_days(self, track: str) -> set[str]:
        """Dates marked as having cleared the completion threshold."""
        validate_track(track)
        if self.current_user_id() is None:
            return set()
        return self._load_string_set(COMPLETED_DAY_KEYS[track])

    def mark_day_completed(self, track: str, day_date: str) -> bool:
        validate_track(track)
        days = self._load_string_set(COMPLETED_DAY_KEYS[track])
        if day_date in days:
            return False
        days.add(day_date)
        self._save_json(COMPLETED_DAY_KEYS[track], sorted(days))
        return True

    # ------------------------------------------------------------------
    # Achievement unlock ledger
    # ------------------------------------------------------------------

    def load_unlocks(self) -> dict[str, str]:
        """First-unlock times by achievement id."""
        if self.current_user_id() is None:
            return {}
        data = self._load_json(UNLOCKS_KEY)
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def save_unlocks(self, ledger: dict[str, str]) -> None:
        if self.current_user_id() is None:
            return
        self._save_json(UNLOCKS_KEY, ledger)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset_plan(self, track: str) -> None:
        """Remove a track's plan together with its completion log and day markers."""
        validate_track(track)
        for base_key in (PLAN_KEYS[track], COMPLETED_ITEM_KEYS[track], COMPLETED_DAY_KEYS[track]):
            self.storage.remove(self._key(base_key))

    def clear_progress(self) -> None:
        """Wipe the current user's completion logs, day markers and unlock ledger."""
        for track in ("workout", "diet"):
            self.storage.remove(self._key(COMPLETED_ITEM_KEYS[track]))
            self.storage.remove(self._key(COMPLETED_DAY_KEYS[track]))
        self.storage.remove(self._key(UNLOCKS_KEY))


def get_default_store_path() -> Path:
    """Storage file location from settings (default ~/.streak-keeper/store.json)."""
    return get_store_path()


def open_store(store_path: str | Path | None = None) -> ProgressStore:
    """ProgressStore over a JSON file, at store_path or the configured default."""
    if store_path is None:
        store_path = get_default_store_path()
    return ProgressStore(JsonFileStorage(store_path))
