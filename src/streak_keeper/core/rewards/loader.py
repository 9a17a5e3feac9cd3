"""
YAML → reward rule loader.

Loads the achievement and milestone tables from the bundled
``src/streak_keeper/rewards.yaml``. The tables are fixed: there is no user
override.

Usage (internal, called by registry.py):
    from .loader import load_rewards_from_yaml
    achievements, milestones = load_rewards_from_yaml()
"""

from __future__ import annotations

import warnings
from pathlib import Path

import yaml

from .base import REWARD_CATEGORIES, AchievementRule, MilestoneRule

_REQUIRED_ACHIEVEMENT_FIELDS: frozenset[str] = frozenset(
    {"id", "title", "description", "icon", "category", "threshold"}
)


def achievement_from_dict(d: dict) -> AchievementRule:
    """Convert a raw dict (from YAML) to an AchievementRule.

    Raises ValueError if a required field is absent or the category is unknown.
    """
    missing = _REQUIRED_ACHIEVEMENT_FIELDS - set(d)
    if missing:
        raise ValueError(f"AchievementRule missing fields: {sorted(missing)}")
    category = str(d["category"])
    if category not in REWARD_CATEGORIES:
        raise ValueError(f"AchievementRule '{d['id']}' has unknown category {category!r}")
    return AchievementRule(
        id=str(d["id"]),
        title=str(d["title"]),
        description=str(d["description"]),
        icon=str(d["icon"]),
        category=category,
        threshold=int(d["threshold"]),
    )


def milestones_from_dict(d: dict) -> list[MilestoneRule]:
    """Convert the ``milestones`` mapping {category: [{target, title}]} to rules."""
    rules: list[MilestoneRule] = []
    for category, entries in d.items():
        if category not in REWARD_CATEGORIES:
            raise ValueError(f"Unknown milestone category {category!r}")
        for entry in entries or []:
            if "target" not in entry or "title" not in entry:
                raise ValueError(f"Milestone in '{category}' needs target and title")
            rules.append(
                MilestoneRule(
                    category=category,
                    target=int(entry["target"]),
                    title=str(entry["title"]),
                )
            )
    return rules


def _get_bundled_rewards_path() -> Path | None:
    """Return path to the bundled rewards.yaml, or None if not found."""
    # loader.py lives at src/streak_keeper/core/rewards/loader.py
    # three levels up → src/streak_keeper/
    candidate = Path(__file__).parent.parent.parent / "rewards.yaml"
    return candidate if candidate.is_file() else None


def load_rewards_from_yaml(
    path: Path | None = None,
) -> tuple[list[AchievementRule], list[MilestoneRule]] | None:
    """Return (achievement rules, milestone rules) from the rewards YAML.

    Args:
        path: Alternate YAML file; defaults to the bundled rewards.yaml

    Returns None (rather than raising) so the registry decides how to fail.
    """
    path = path or _get_bundled_rewards_path()
    if path is None:
        return None

    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"streak-keeper: cannot read {path} ({exc})", stacklevel=2)
        return None

    if not isinstance(raw, dict):
        return None

    try:
        achievements = [achievement_from_dict(d) for d in raw.get("achievements") or []]
        milestones = milestones_from_dict(raw.get("milestones") or {})
    except (TypeError, ValueError) as exc:
        warnings.warn(f"streak-keeper: invalid reward table in {path}: {exc}", stacklevel=2)
        return None

    return achievements, milestones
