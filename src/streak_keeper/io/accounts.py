"""
Per-user key namespacing.

Every persisted value is stored under a key derived from the current user
id, so switching accounts never exposes another user's plans or logs.
"""

from typing import Any

from .storage import KeyValueStorage

CURRENT_USER_KEY = "current_user_id"


def get_current_user_id(storage: KeyValueStorage) -> str | None:
    """Return the signed-in user id, or None when nobody is signed in."""
    user_id = storage.get(CURRENT_USER_KEY)
    return user_id or None


def set_current_user_id(storage: KeyValueStorage, user_id: str) -> None:
    """
    Record the signed-in user.

    Raises:
        ValueError: If user_id is blank
    """
    user_id = user_id.strip()
    if not user_id:
        raise ValueError("user id must be non-empty")
    storage.set(CURRENT_USER_KEY, user_id)


def clear_current_user_id(storage: KeyValueStorage) -> None:
    storage.remove(CURRENT_USER_KEY)


def user_cache_key(base_key: str, user_id: str | None) -> str:
    """
    Derive the storage key for a per-user value.

    Returns "user_{user_id}_{base_key}", or "temp_{base_key}" when there is
    no user.
    """
    if not user_id:
        return f"temp_{base_key}"
    return f"user_{user_id}_{base_key}"


def validate_cached_data(data: Any, user_id: str | None) -> bool:
    """
    Check that a cached payload may be used by user_id.

    False without a user. A payload that names its owner must name this
    user; a payload without an owner is accepted.
    """
    if not user_id:
        return False
    if isinstance(data, dict) and data.get("user_id") is not None:
        return data["user_id"] == user_id
    return True
