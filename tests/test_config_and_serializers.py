"""
Tests for YAML settings, the reward tables and plan serialization.
"""

import json

import pytest

from streak_keeper.core.engine.config_loader import (
    _deep_merge,
    get_plan_ttls,
    get_store_path,
    load_settings,
)
from streak_keeper.core.models import DayTemplate, Plan, PlanItem
from streak_keeper.core.rewards.loader import load_rewards_from_yaml
from streak_keeper.io.serializers import (
    ValidationError,
    dict_to_plan,
    plan_to_dict,
    validate_date,
)


def _diet_plan() -> Plan:
    days = [DayTemplate(is_rest_day=False, items=[PlanItem("Oats", slot="breakfast", calories=300)]) for _ in range(6)]
    days.append(DayTemplate(is_rest_day=True, label="Free day"))
    return Plan(
        track="diet",
        goal="Fat Loss",
        start_date="2024-01-07",
        total_weeks=8,
        weekly_template=days,
        user_id="alice",
        target_calories=1800,
        water_intake="2 liters",
    )


class TestSettings:
    def test_bundled_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_plan_ttls() == {"workout": 300.0, "diet": 1800.0}
        assert get_store_path() == tmp_path / ".streak-keeper" / "store.json"

    def test_user_override_is_merged(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        override = tmp_path / ".streak-keeper" / "settings.yaml"
        override.parent.mkdir()
        override.write_text("cache:\n  diet_plan_ttl_s: 60\n", encoding="utf-8")

        ttls = get_plan_ttls()
        assert ttls["diet"] == 60.0
        assert ttls["workout"] == 300.0

    def test_broken_user_override_warns(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        override = tmp_path / ".streak-keeper" / "settings.yaml"
        override.parent.mkdir()
        override.write_text("cache: [unclosed\n", encoding="utf-8")

        with pytest.warns(UserWarning, match="streak-keeper"):
            settings = load_settings()
        assert settings["cache"]["workout_plan_ttl_s"] == 300

    def test_empty_user_section_keeps_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        override = tmp_path / ".streak-keeper" / "settings.yaml"
        override.parent.mkdir()
        override.write_text("cache:\n  # workout_plan_ttl_s: 60\nstorage:\n", encoding="utf-8")

        assert get_plan_ttls() == {"workout": 300.0, "diet": 1800.0}
        assert get_store_path() == tmp_path / ".streak-keeper" / "store.json"

    def test_non_numeric_ttl_warns_and_uses_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        override = tmp_path / ".streak-keeper" / "settings.yaml"
        override.parent.mkdir()
        override.write_text("cache:\n  workout_plan_ttl_s: soon\n  diet_plan_ttl_s: -5\n", encoding="utf-8")

        with pytest.warns(UserWarning, match="workout_plan_ttl_s"):
            ttls = get_plan_ttls()
        assert ttls == {"workout": 300.0, "diet": 1800.0}

    def test_non_mapping_section_warns(self):
        with pytest.warns(UserWarning, match="'cache'"):
            assert get_plan_ttls({"cache": [1, 2]}) == {"workout": 300.0, "diet": 1800.0}

    def test_explicit_settings(self):
        assert get_store_path({"storage": {"path": "/data/store.json"}}).as_posix() == "/data/store.json"
        assert get_plan_ttls({}) == {"workout": 300.0, "diet": 1800.0}

    def test_deep_merge_keeps_base(self):
        base = {"a": {"x": 1, "y": 2}}
        merged = _deep_merge(base, {"a": {"y": 3}})
        assert merged == {"a": {"x": 1, "y": 3}}
        assert base == {"a": {"x": 1, "y": 2}}


class TestRewardLoader:
    def test_bundled_tables(self):
        achievements, milestones = load_rewards_from_yaml()
        assert len(achievements) == 6
        assert len(milestones) == 10

    def test_unknown_category_warns(self, tmp_path):
        path = tmp_path / "rewards.yaml"
        path.write_text(
            "achievements:\n"
            "  - {id: x, title: X, description: d, icon: '*', category: sleep, threshold: 3}\n",
            encoding="utf-8",
        )
        with pytest.warns(UserWarning, match="invalid reward table"):
            assert load_rewards_from_yaml(path) is None

    def test_missing_file_warns(self, tmp_path):
        with pytest.warns(UserWarning):
            assert load_rewards_from_yaml(tmp_path / "absent.yaml") is None


class TestPlanSerialization:
    def test_stored_plan_restores(self):
        plan = dict_to_plan(json.loads(json.dumps(plan_to_dict(_diet_plan()))))
        assert plan == _diet_plan()
        assert plan.weekly_template[0].items[0].item_id == "breakfast-Oats"

    def test_optional_fields_omitted(self):
        plan = _diet_plan()
        plan.target_calories = None
        plan.water_intake = None
        data = plan_to_dict(plan)
        assert "target_calories" not in data
        assert "water_intake" not in data

    def test_non_object_payload(self):
        with pytest.raises(ValidationError, match="must be an object"):
            dict_to_plan(["not", "a", "plan"])

    def test_wrong_template_length(self):
        data = plan_to_dict(_diet_plan())
        data["weekly_template"] = data["weekly_template"][:5]
        with pytest.raises(ValidationError, match="7 days"):
            dict_to_plan(data)

    def test_missing_field(self):
        data = plan_to_dict(_diet_plan())
        del data["start_date"]
        with pytest.raises(ValidationError, match="start_date"):
            dict_to_plan(data)

    def test_unknown_track(self):
        data = plan_to_dict(_diet_plan())
        data["track"] = "sleep"
        with pytest.raises(ValidationError):
            dict_to_plan(data)


class TestValidateDate:
    def test_valid(self):
        assert validate_date("2024-02-29") == "2024-02-29"

    @pytest.mark.parametrize("value", ["2024-2-1", "2023-02-29", "yesterday", ""])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_date(value)
