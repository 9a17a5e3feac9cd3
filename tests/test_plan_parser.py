"""
Tests for the generated-plan text parser.

Tests:
- Exercise lines in sets × reps, circuit and free-form layouts
- Rest headers and missing day sections
- Diet meals, snacks and the Sunday-first slot mapping
- Goal, duration and diet header fields
"""

from datetime import date

import pytest

from streak_keeper.io.plan_parser import (
    parse_diet_plan,
    parse_duration_weeks,
    parse_exercise_line,
    parse_plan,
    parse_workout_plan,
)


WORKOUT_TEXT = """**Goal:** Build Muscle
**Duration:** 3 months

---
**Day 1: Upper Body Strength 💪**
- Push-ups – 3 × 8-12 – Rest 60s – Muscles: Chest, Triceps – ~50 kcal
- Pull-ups – 4 × 6 – Rest 90s – Muscles: Back, Biceps – ~60 kcal
This line is commentary.
---
**Day 2: HIIT Circuit**
- Burpees – 4 Rounds × 30s – Rest 30s – Muscles: Full body – ~80 kcal
- Plank – 3 × 45 sec – Rest 1 min – Muscles: Core – ~20 kcal
---
**Day 3: Rest & Recovery 🛌**
- Light walk
---
**Day 4: Lower Body**
Nothing structured here.
---
"""

DIET_TEXT = """**Goal:** Fat Loss
**Target Daily Calories:** 1800
**Water Intake:** 2.5 liters
---
**Day 1: Monday**
**Breakfast:** Oatmeal with berries – 420 kcal
**Lunch:** Grilled chicken salad – 550 kcal
Dinner: Baked salmon - 600 kcal
- Snack 1: Greek yogurt – 150 kcal
- Snack 2: Almonds – 160 kcal
---
**Day 7: Sunday**
**Breakfast:** Eggs on toast – 380 kcal
---
**Day 2: Tuesday**
Eat whatever.
"""


class TestExerciseLines:
    def test_sets_and_rep_range(self):
        item = parse_exercise_line("- Push-ups – 3 × 8-12 – Rest 60s – Muscles: Chest, Triceps – ~50 kcal")
        assert item.name == "Push-ups"
        assert item.sets == 3
        assert item.reps == "8-12"
        assert item.rest == "60s"
        assert item.target_muscles == ["Chest", "Triceps"]
        assert item.calories == 50

    def test_circuit_rounds(self):
        item = parse_exercise_line("- Burpees – 4 Rounds × 30s – Rest 30s – Muscles: Full body – ~80 kcal")
        assert (item.name, item.sets, item.reps, item.rest) == ("Burpees", 4, "30s", "30s")

    def test_free_form_reps_and_rest(self):
        item = parse_exercise_line("- Plank – 3 × 45 sec – Rest 1 min – Muscles: Core – ~20 kcal")
        assert (item.reps, item.rest) == ("45 sec", "1 min")

    def test_em_dash_separators(self):
        item = parse_exercise_line("* Lunges — 3 x 10 — Rest 45s — Muscles: Legs — 40 kcal")
        assert item.name == "Lunges"
        assert item.calories == 40

    def test_unrecognised_line(self):
        assert parse_exercise_line("- Light walk") is None


class TestWorkoutPlan:
    @pytest.fixture
    def plan(self):
        return parse_workout_plan(WORKOUT_TEXT, date(2024, 1, 1))

    def test_header_fields(self, plan):
        assert plan.track == "workout"
        assert plan.goal == "Build Muscle"
        assert plan.duration == "3 months"
        assert plan.total_weeks == 12
        assert plan.start_date == "2024-01-01"

    def test_always_seven_days(self, plan):
        assert len(plan.weekly_template) == 7

    def test_parsed_days(self, plan):
        monday, tuesday = plan.weekly_template[0], plan.weekly_template[1]
        assert monday.label == "Upper Body Strength 💪"
        assert [i.name for i in monday.items] == ["Push-ups", "Pull-ups"]
        assert [i.name for i in tuesday.items] == ["Burpees", "Plank"]

    def test_rest_header(self, plan):
        wednesday = plan.weekly_template[2]
        assert wednesday.is_rest_day
        assert wednesday.items == []

    def test_section_without_items_is_not_rest(self, plan):
        thursday = plan.weekly_template[3]
        assert not thursday.is_rest_day
        assert thursday.items == []

    def test_missing_sections_are_rest(self, plan):
        assert all(day.is_rest_day for day in plan.weekly_template[4:])

    def test_explicit_weeks_override_duration(self):
        assert parse_workout_plan(WORKOUT_TEXT, date(2024, 1, 1), total_weeks=6).total_weeks == 6

    def test_empty_text(self):
        plan = parse_workout_plan("", date(2024, 1, 1))
        assert plan.goal == "General Fitness"
        assert all(day.is_rest_day for day in plan.weekly_template)


class TestDietPlan:
    @pytest.fixture
    def plan(self):
        return parse_diet_plan(DIET_TEXT, date(2024, 1, 7))

    def test_header_fields(self, plan):
        assert plan.track == "diet"
        assert plan.goal == "Fat Loss"
        assert plan.target_calories == 1800
        assert plan.water_intake == "2.5 liters"
        assert plan.total_weeks == 12

    def test_day_one_lands_on_monday_slot(self, plan):
        monday = plan.weekly_template[1]
        assert [i.item_id for i in monday.items] == [
            "breakfast-Oatmeal with berries",
            "lunch-Grilled chicken salad",
            "dinner-Baked salmon",
            "snack-Greek yogurt",
            "snack-Almonds",
        ]
        assert sum(i.calories for i in monday.items) == 1880

    def test_day_seven_lands_on_sunday_slot(self, plan):
        sunday = plan.weekly_template[0]
        assert [i.item_id for i in sunday.items] == ["breakfast-Eggs on toast"]

    def test_section_without_meals_is_not_rest(self, plan):
        tuesday = plan.weekly_template[2]
        assert not tuesday.is_rest_day
        assert tuesday.items == []

    def test_missing_sections_are_rest(self, plan):
        assert all(plan.weekly_template[i].is_rest_day for i in (3, 4, 5, 6))


class TestDuration:
    @pytest.mark.parametrize(
        "text,weeks",
        [
            ("12 weeks", 12),
            ("3 months", 12),
            ("6-month program", 24),
            ("1 week", 1),
            ("8", 8),
            ("ongoing", 12),
        ],
    )
    def test_parse_duration_weeks(self, text, weeks):
        assert parse_duration_weeks(text) == weeks


class TestDispatch:
    def test_unknown_track(self):
        with pytest.raises(ValueError):
            parse_plan(WORKOUT_TEXT, "yoga", date(2024, 1, 1))

    def test_diet_dispatch(self):
        assert parse_plan(DIET_TEXT, "diet", date(2024, 1, 1)).track == "diet"
