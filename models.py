# models.py
import math
import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple, Union

from errors import ValidationError

WEEK = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

REPEAT_TYPES = ("daily", "weekly", "specific_days")
THEMES = ("light", "dark")

COLORS = [
    "#ef4444",  # red
    "#f97316",  # orange
    "#f59e0b",  # amber
    "#84cc16",  # lime
    "#10b981",  # emerald
    "#06b6d4",  # cyan
    "#3b82f6",  # blue
    "#8b5cf6",  # violet
    "#d946ef",  # fuchsia
    "#f43f5e",  # rose
]

_DAY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

DayLike = Union[date, str]


@dataclass(frozen=True)
class Habit:
    id: str
    name: str
    description: Optional[str] = None
    color: str = COLORS[0]
    points: float = 0
    repeat_type: str = "daily"   # "daily", "weekly" or "specific_days"
    repeat_goal: int = 1
    repeat_days: Tuple[str, ...] = ()
    created_at: str = ""
    archived: bool = False

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "points": self.points,
            "repeatType": self.repeat_type,
            "repeatGoal": self.repeat_goal,
            "repeatDays": list(self.repeat_days),
            "createdAt": self.created_at,
            "archived": self.archived,
        }
        if self.description is not None:
            out["description"] = self.description
        return out

    @classmethod
    def from_dict(cls, raw) -> "Habit":
        if not isinstance(raw, dict):
            raise ValidationError("Habit entries must be objects.")
        habit_id = str(raw.get("id") or "").strip()
        name = str(raw.get("name") or "").strip()
        if not habit_id or not name:
            raise ValidationError("Habit entries need a non-empty 'id' and 'name'.")
        repeat_type = raw.get("repeatType")
        if repeat_type not in REPEAT_TYPES:
            repeat_type = "daily"
        return cls(
            id=habit_id,
            name=name,
            description=raw.get("description"),
            color=raw.get("color") or COLORS[0],
            points=max(0, _to_number(raw.get("points"), 0)),
            repeat_type=repeat_type,
            repeat_goal=max(1, int(_to_number(raw.get("repeatGoal"), 1))),
            repeat_days=tuple(d for d in _as_list(raw.get("repeatDays")) if d in WEEK),
            created_at=str(raw.get("createdAt") or ""),
            archived=bool(raw.get("archived", False)),
        )


@dataclass(frozen=True)
class HabitLog:
    id: str
    habit_id: str
    date: str       # YYYY-MM-DD
    count: int

    def to_dict(self) -> dict:
        return {"id": self.id, "habitId": self.habit_id, "date": self.date, "count": self.count}

    @classmethod
    def from_dict(cls, raw) -> "HabitLog":
        if not isinstance(raw, dict):
            raise ValidationError("Log entries must be objects.")
        count = raw.get("count", 0)
        if isinstance(count, bool) or not isinstance(count, (int, float)) or not math.isfinite(count):
            raise ValidationError(f"Log count must be a number, got {count!r}.")
        return cls(
            id=str(raw.get("id") or ""),
            habit_id=str(raw.get("habitId") or ""),
            date=str(raw.get("date") or ""),
            count=int(count),
        )


@dataclass(frozen=True)
class AppData:
    habits: Tuple[Habit, ...] = ()
    logs: Tuple[HabitLog, ...] = ()
    theme: str = "light"

    def to_dict(self) -> dict:
        return {
            "habits": [h.to_dict() for h in self.habits],
            "logs": [l.to_dict() for l in self.logs],
            "theme": self.theme,
        }

    @classmethod
    def from_dict(cls, raw) -> "AppData":
        if not isinstance(raw, dict):
            raise ValidationError("App data must be a JSON object.")
        if not isinstance(raw.get("habits"), list) or not isinstance(raw.get("logs"), list):
            raise ValidationError("App data needs 'habits' and 'logs' arrays.")
        theme = raw.get("theme")
        return cls(
            habits=tuple(Habit.from_dict(h) for h in raw["habits"]),
            logs=_fold_logs(HabitLog.from_dict(l) for l in raw["logs"]),
            theme=theme if theme in THEMES else "light",
        )

    def habit_lookup(self) -> dict:
        return {h.id: h for h in self.habits}


def generate_id() -> str:
    """Opaque random identifier for habits and logs."""
    return uuid.uuid4().hex


def _to_number(value, default):
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _fold_logs(logs) -> Tuple[HabitLog, ...]:
    """One entry per (habit_id, date), the last one wins; empty counts are dropped."""
    latest = {}
    for log in logs:
        latest[(log.habit_id, log.date)] = log
    return tuple(log for log in latest.values() if log.count > 0)


def new_habit(
    name: str,
    points: float = 1,
    repeat_type: str = "daily",
    repeat_goal: int = 1,
    repeat_days: Optional[List[str]] = None,
    color: str = COLORS[0],
    description: Optional[str] = None,
    habit_id: Optional[str] = None,
) -> Habit:
    """Build a fresh habit the way the habit form does."""
    if not name or not name.strip():
        raise ValidationError("Habit name cannot be empty.")
    if repeat_type not in REPEAT_TYPES:
        raise ValidationError(f"Unknown repeat type '{repeat_type}'.")
    if points < 0:
        raise ValidationError("Habit points cannot be negative.")
    days = tuple(repeat_days or ())
    unknown = [d for d in days if d not in WEEK]
    if unknown:
        raise ValidationError(f"Unknown weekday tag(s): {', '.join(unknown)}.")
    return Habit(
        id=habit_id or generate_id(),
        name=name.strip(),
        description=description,
        color=color,
        points=points,
        repeat_type=repeat_type,
        repeat_goal=max(1, int(repeat_goal)),
        repeat_days=days,
        created_at=datetime.now(timezone.utc).isoformat(),
        archived=False,
    )


# -------- Dates --------
def parse_day(value: DayLike) -> date:
    """Accept a date or a 'YYYY-MM-DD' string; anything else is a ValidationError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DAY_PATTERN.fullmatch(value):
        raise ValidationError(f"Expected a YYYY-MM-DD date, got {value!r}.")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Not a calendar date: {value!r}.")


def day_key(value: DayLike) -> str:
    return parse_day(value).isoformat()


def weekday_tag(d: date) -> str:
    # date.weekday() is Monday-based
    return WEEK[(d.weekday() + 1) % 7]


def date_range(start: DayLike, end: DayLike) -> List[str]:
    """Inclusive list of day keys; empty when end is before start."""
    curr, last = parse_day(start), parse_day(end)
    days = []
    while curr <= last:
        days.append(curr.isoformat())
        curr += timedelta(days=1)
    return days


# -------- Scheduling --------
def is_due(h: Habit, d: DayLike) -> bool:
    day = parse_day(d)
    if h.repeat_type == "daily":
        return True
    if h.repeat_type == "specific_days":
        return weekday_tag(day) in h.repeat_days
    if h.repeat_type == "weekly":
        # any day counts toward the weekly goal
        return True
    return False
