"""
YAML → runtime settings loader.

Loads settings from settings.yaml (bundled with the package) and optionally
merges user overrides from ~/.streak-keeper/settings.yaml.

Usage:
    from streak_keeper.core.engine.config_loader import load_settings
    settings = load_settings()
    ttl = settings.get("cache", {}).get("workout_plan_ttl_s", 300)

If the bundled YAML cannot be parsed, lookups fall back to the defaults in
config.py. If the user override exists but has parse errors, a warning is
issued and the file is ignored.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import DIET_PLAN_CACHE_TTL_S, WORKOUT_PLAN_CACHE_TTL_S

DEFAULT_STORE_PATH = "~/.streak-keeper/store.json"

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path, warn: bool = False) -> dict[str, Any]:
    """Load a single YAML file; return {} if it is unreadable or not a mapping."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        if warn:
            warnings.warn(f"streak-keeper: ignoring {path} ({exc})", stacklevel=3)
        return {}
    if not isinstance(data, dict):
        if warn and data is not None:
            warnings.warn(f"streak-keeper: ignoring {path} (not a mapping)", stacklevel=3)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if v is None and k in result:
            # Empty section, e.g. every key commented out
            continue
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    # config_loader.py lives at src/streak_keeper/core/engine/config_loader.py
    candidate = Path(__file__).parent.parent.parent / "settings.yaml"
    return candidate if candidate.is_file() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.streak-keeper/settings.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".streak-keeper" / "settings.yaml"
    return p if p.exists() else None


def load_settings() -> dict[str, Any]:
    """
    Load and merge runtime settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/streak_keeper/settings.yaml
    2. User override at ~/.streak-keeper/settings.yaml

    Returns:
        Merged dict of settings sections. Empty dict if no YAML available.
    """
    settings: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        settings = _deep_merge(settings, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        settings = _deep_merge(settings, _load_yaml_file(user, warn=True))

    return settings


def _section(settings: dict[str, Any], name: str) -> dict[str, Any]:
    section = settings.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        warnings.warn(f"streak-keeper: ignoring settings section '{name}' (not a mapping)", stacklevel=3)
        return {}
    return section


def _ttl(cache: dict[str, Any], key: str, default: float) -> float:
    raw = cache.get(key)
    if raw is None:
        return default
    try:
        ttl = float(raw)
    except (TypeError, ValueError):
        ttl = 0.0
    if ttl <= 0:
        warnings.warn(f"streak-keeper: ignoring cache.{key}={raw!r} (expected a positive number)", stacklevel=3)
        return default
    return ttl


def get_store_path(settings: dict[str, Any] | None = None) -> Path:
    """Storage file path from settings, with ~ expanded."""
    settings = load_settings() if settings is None else settings
    raw = _section(settings, "storage").get("path") or DEFAULT_STORE_PATH
    return Path(str(raw)).expanduser()


def get_plan_ttls(settings: dict[str, Any] | None = None) -> dict[str, float]:
    """Per-track plan cache TTLs in seconds."""
    settings = load_settings() if settings is None else settings
    cache = _section(settings, "cache")
    return {
        "workout": _ttl(cache, "workout_plan_ttl_s", WORKOUT_PLAN_CACHE_TTL_S),
        "diet": _ttl(cache, "diet_plan_ttl_s", DIET_PLAN_CACHE_TTL_S),
    }
