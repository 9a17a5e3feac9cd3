"""
AI plan text → Plan parser.

Generated plans are markdown-ish text with day sections separated by
"---", each headed "**Day N: <focus>**". Parsing is best-effort: lines
that match no known item pattern are dropped (logged at debug level), a
day with no section becomes a rest day, and a day whose section yields no
items becomes a non-rest day with an empty item list. A plan always comes
out with exactly 7 template days.

Workout item lines look like:

    - Push-ups – 3 × 8-12 – Rest 60s – Muscles: Chest, Triceps – ~50 kcal
    - Burpees – 4 Rounds × 30s – Rest 30s – Muscles: Full body – ~80 kcal
    - Plank – 3 × 45 sec – Rest 1 min – Muscles: Core – ~20 kcal

Diet item lines look like:

    **Breakfast:** Oatmeal with berries – 420 kcal
    Lunch: Grilled chicken salad - 550 kcal
    - Snack 1: Greek yogurt – 150 kcal
"""

import logging
import re
from datetime import date

from ..core.config import DAYS_PER_WEEK, DEFAULT_TOTAL_WEEKS
from ..core.models import DayTemplate, Plan, PlanItem

logger = logging.getLogger(__name__)

# En dash or em dash: hyphens occur inside exercise names
_SEP = r"\s*[–—]\s*"

_SETS_REPS_RE = re.compile(
    r"^[-•*]\s*(?P<name>.+?)" + _SEP
    + r"(?P<sets>\d+)\s*[×xX]\s*(?P<reps>\d+(?:\s*[-–]\s*\d+)?)" + _SEP
    + r"Rest\s*(?P<rest>\d+)\s*s" + _SEP
    + r"Muscles:\s*(?P<muscles>[^–—]+?)" + _SEP
    + r"~?\s*(?P<kcal>\d+)\s*kcal",
    re.IGNORECASE,
)

_CIRCUIT_RE = re.compile(
    r"^[-•*]\s*(?P<name>.+?)" + _SEP
    + r"(?P<sets>\d+)\s*Rounds?\s*[×xX]\s*(?P<secs>\d+)\s*s" + _SEP
    + r"Rest\s*(?P<rest>\d+)\s*s" + _SEP
    + r"Muscles:\s*(?P<muscles>[^–—]+?)" + _SEP
    + r"~?\s*(?P<kcal>\d+)\s*kcal",
    re.IGNORECASE,
)

_FREEFORM_RE = re.compile(
    r"^[-•*]\s*(?P<name>.+?)" + _SEP
    + r"(?P<sets>\d+)\s*[×xX]\s*(?P<reps>[^–—]+?)" + _SEP
    + r"Rest\s*(?P<rest>[^–—]+?)" + _SEP
    + r"Muscles:\s*(?P<muscles>[^–—]+?)" + _SEP
    + r"~?\s*(?P<kcal>\d+)\s*kcal",
    re.IGNORECASE,
)

_HEADER_RE = re.compile(r"\*\*\s*day\s+\d+\s*:", re.IGNORECASE)
_REST_MARKERS = ("rest", "recovery", "🛌", "🏃‍♂️")

_GOAL_RE = re.compile(r"\*\*Goal:\*\*\s*(.+?)\s*(?:\n|$)", re.IGNORECASE)
_DURATION_RE = re.compile(r"\*\*Duration:\*\*\s*(.+?)\s*(?:\n|$)", re.IGNORECASE)
_WEEKS_RE = re.compile(r"(\d+)[\s-]*(weeks?|months?)", re.IGNORECASE)
_TARGET_CALORIES_RE = re.compile(r"\*\*Target Daily Calories:\*\*\s*(\d+)", re.IGNORECASE)
_WATER_RE = re.compile(r"\*\*Water Intake:\*\*\s*([^\n]+)", re.IGNORECASE)

_SNACK_RE = re.compile(
    r"^\s*[-•*]\s*Snack\s*\d*:\s*(?P<name>.+?)\s*[–—-]\s*(?P<kcal>\d+)\s*kcal",
    re.IGNORECASE | re.MULTILINE,
)

_MEAL_NAMES = ("breakfast", "lunch", "dinner")


# =============================================================================
# Sections
# =============================================================================


def split_day_sections(text: str) -> dict[int, str]:
    """
    Map day numbers 1-7 to their section text.

    Sections are separated by "---". The first section mentioning
    "Day N:" claims day N.
    """
    sections = [s for s in text.split("---") if s.strip()]
    found: dict[int, str] = {}
    for day_number in range(1, DAYS_PER_WEEK + 1):
        pattern = re.compile(rf"\bday\s+{day_number}\s*:", re.IGNORECASE)
        for section in sections:
            if pattern.search(section):
                found[day_number] = section
                break
    return found


def _header_line(section: str) -> str:
    for line in section.splitlines():
        if _HEADER_RE.search(line):
            return line.strip()
    return ""


def _header_label(header: str) -> str:
    """Focus text after 'Day N:' with markdown stripped."""
    label = re.sub(r"^.*?day\s+\d+\s*:", "", header, flags=re.IGNORECASE)
    return label.replace("*", "").strip()


def is_rest_header(header: str) -> bool:
    lowered = header.lower()
    return any(marker in lowered for marker in _REST_MARKERS)


def parse_duration_weeks(duration: str, default: int = DEFAULT_TOTAL_WEEKS) -> int:
    """
    Read a plan length from text such as "12 weeks" or "3-month".

    A month counts as 4 weeks. Falls back to a bare number, then default.
    """
    m = _WEEKS_RE.search(duration)
    if m:
        n = int(m.group(1))
        weeks = n * 4 if m.group(2).lower().startswith("month") else n
        return max(1, weeks)
    bare = re.search(r"(\d+)", duration)
    if bare and int(bare.group(1)) > 0:
        return int(bare.group(1))
    return default


def _search_group(pattern: re.Pattern, text: str) -> str | None:
    m = pattern.search(text)
    return m.group(1).strip() if m else None


# =============================================================================
# Workout
# =============================================================================


def _muscles(raw: str) -> list[str]:
    return [m.strip() for m in raw.split(",") if m.strip()]


def parse_exercise_line(line: str) -> PlanItem | None:
    """Parse one exercise line; None if it matches no known layout."""
    line = line.strip()

    m = _SETS_REPS_RE.match(line)
    if m:
        return PlanItem(
            name=m.group("name").strip(),
            sets=int(m.group("sets")),
            reps=re.sub(r"\s+", "", m.group("reps")).replace("–", "-"),
            rest=f"{m.group('rest')}s",
            target_muscles=_muscles(m.group("muscles")),
            calories=int(m.group("kcal")),
        )

    m = _CIRCUIT_RE.match(line)
    if m:
        return PlanItem(
            name=m.group("name").strip(),
            sets=int(m.group("sets")),
            reps=f"{m.group('secs')}s",
            rest=f"{m.group('rest')}s",
            target_muscles=_muscles(m.group("muscles")),
            calories=int(m.group("kcal")),
        )

    m = _FREEFORM_RE.match(line)
    if m:
        return PlanItem(
            name=m.group("name").strip(),
            sets=int(m.group("sets")),
            reps=m.group("reps").strip(),
            rest=m.group("rest").strip(),
            target_muscles=_muscles(m.group("muscles")),
            calories=int(m.group("kcal")),
        )

    return None


def parse_exercises(section: str) -> list[PlanItem]:
    items: list[PlanItem] = []
    for line in section.splitlines():
        line = line.strip()
        if not line or line[0] not in "-•*" or line.startswith("**"):
            continue
        item = parse_exercise_line(line)
        if item is None:
            logger.debug(f"Dropping unrecognised exercise line: {line!r}")
            continue
        items.append(item)
    return items


def parse_workout_days(text: str) -> list[DayTemplate]:
    """
    Build the Monday-first workout template from day sections.

    Day N fills template slot N-1.
    """
    sections = split_day_sections(text)
    template: list[DayTemplate] = []
    for day_number in range(1, DAYS_PER_WEEK + 1):
        section = sections.get(day_number)
        if section is None:
            logger.debug(f"No section for workout day {day_number}; using a rest day")
            template.append(DayTemplate(is_rest_day=True, label="Rest"))
            continue

        header = _header_line(section)
        label = _header_label(header)
        if is_rest_header(header):
            template.append(DayTemplate(is_rest_day=True, label=label or "Rest"))
        else:
            template.append(DayTemplate(is_rest_day=False, items=parse_exercises(section), label=label))
    return template


def parse_workout_plan(
    text: str,
    start_date: date,
    total_weeks: int | None = None,
    goal: str | None = None,
) -> Plan:
    """
    Parse a generated workout plan.

    Args:
        text: Generated plan text
        start_date: First day of the plan
        total_weeks: Plan length; read from "**Duration:**" when omitted
        goal: Fallback goal when the text has no "**Goal:**" line

    Returns:
        Workout Plan with a 7-day Monday-first template
    """
    duration = _search_group(_DURATION_RE, text) or ""
    if total_weeks is None:
        total_weeks = parse_duration_weeks(duration)

    return Plan(
        track="workout",
        goal=_search_group(_GOAL_RE, text) or goal or "General Fitness",
        start_date=start_date.isoformat(),
        total_weeks=total_weeks,
        weekly_template=parse_workout_days(text),
        duration=duration or f"{total_weeks} weeks",
    )


# =============================================================================
# Diet
# =============================================================================


def parse_meal(section: str, meal: str) -> PlanItem | None:
    """
    Find "Meal: name – N kcal" for one of breakfast/lunch/dinner.

    Bold ("**Lunch:**") and plain ("Lunch:") labels are both accepted.
    """
    patterns = (
        rf"\*\*{meal}:\*\*\s*(.+?)\s*[–—-]\s*(\d+)\s*kcal",
        rf"{meal}:\s*(.+?)\s*[–—-]\s*(\d+)\s*kcal",
    )
    for pattern in patterns:
        m = re.search(pattern, section, re.IGNORECASE)
        if m:
            name = m.group(1).replace("*", "").strip()
            if not name:
                return None
            return PlanItem(name=name, slot=meal, calories=int(m.group(2)))
    return None


def parse_snacks(section: str) -> list[PlanItem]:
    return [
        PlanItem(name=m.group("name").strip(), slot="snack", calories=int(m.group("kcal")))
        for m in _SNACK_RE.finditer(section)
        if m.group("name").strip()
    ]


def parse_meals(section: str) -> list[PlanItem]:
    items: list[PlanItem] = []
    for meal in _MEAL_NAMES:
        item = parse_meal(section, meal)
        if item is None:
            logger.debug(f"No {meal} found in diet section")
            continue
        items.append(item)
    items.extend(parse_snacks(section))
    return items


def parse_diet_days(text: str) -> list[DayTemplate]:
    """
    Build the Sunday-first diet template from day sections.

    Day 1 is Monday, so day N fills slot N % 7 (Day 7 lands on Sunday, slot 0).
    """
    sections = split_day_sections(text)
    template: list[DayTemplate | None] = [None] * DAYS_PER_WEEK
    for day_number in range(1, DAYS_PER_WEEK + 1):
        slot = day_number % DAYS_PER_WEEK
        section = sections.get(day_number)
        if section is None:
            logger.debug(f"No section for diet day {day_number}; using a rest day")
            template[slot] = DayTemplate(is_rest_day=True, label="Rest")
            continue
        template[slot] = DayTemplate(
            is_rest_day=False,
            items=parse_meals(section),
            label=_header_label(_header_line(section)),
        )
    return [day for day in template if day is not None]


def parse_diet_plan(
    text: str,
    start_date: date,
    total_weeks: int | None = None,
    goal: str | None = None,
) -> Plan:
    """
    Parse a generated diet plan.

    Args:
        text: Generated plan text
        start_date: First day of the plan
        total_weeks: Plan length; read from "**Duration:**" when omitted
        goal: Fallback goal when the text has no "**Goal:**" line

    Returns:
        Diet Plan with a 7-day Sunday-first template
    """
    duration = _search_group(_DURATION_RE, text) or ""
    if total_weeks is None:
        total_weeks = parse_duration_weeks(duration)

    target_calories = _search_group(_TARGET_CALORIES_RE, text)

    return Plan(
        track="diet",
        goal=_search_group(_GOAL_RE, text) or goal or "General Health",
        start_date=start_date.isoformat(),
        total_weeks=total_weeks,
        weekly_template=parse_diet_days(text),
        duration=duration or f"{total_weeks} weeks",
        target_calories=int(target_calories) if target_calories else None,
        water_intake=_search_group(_WATER_RE, text),
    )


def parse_plan(text: str, track: str, start_date: date, total_weeks: int | None = None) -> Plan:
    """Dispatch to the workout or diet parser."""
    if track == "workout":
        return parse_workout_plan(text, start_date, total_weeks)
    if track == "diet":
        return parse_diet_plan(text, start_date, total_weeks)
    raise ValueError(f"Unknown track: {track!r}")
