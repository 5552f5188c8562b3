# analytics.py
"""Pure aggregations over an AppData snapshot.

Nothing here mutates its input or raises for logs whose habit has been
deleted: such logs simply contribute zero points.
"""

import math
from datetime import date, timedelta
from typing import Dict, List, Optional

from errors import ValidationError
from models import AppData, HabitLog, DayLike, date_range, day_key, is_due, parse_day

HEATMAP_DAYS = 90          # days back from today, today included on top
HEATMAP_MIN_MAX = 10       # floor for the intensity denominator
HEATMAP_SCALE = 0.6
PADDING = -1
ZERO_COLOR = "rgb(241 245 249)"
PADDING_COLOR = "transparent"
ALL_HABITS = "all"


# =========================
# Points
# =========================

def points_for_log(log: HabitLog, habits_by_id: dict) -> float:
    habit = habits_by_id.get(log.habit_id)
    if habit is None:
        return 0
    return log.count * habit.points


def _matches(log: HabitLog, habit_id: str) -> bool:
    return habit_id == ALL_HABITS or log.habit_id == habit_id


def points_by_day(data: AppData, habit_id: str = ALL_HABITS) -> Dict[str, float]:
    """Map day key -> total points, optionally for a single habit."""
    lookup = data.habit_lookup()
    totals: Dict[str, float] = {}
    for log in data.logs:
        if not _matches(log, habit_id):
            continue
        totals[log.date] = totals.get(log.date, 0) + points_for_log(log, lookup)
    return totals


def daily_points(data: AppData, d: DayLike) -> float:
    key = day_key(d)
    lookup = data.habit_lookup()
    return sum(points_for_log(log, lookup) for log in data.logs if log.date == key)


def ceiling_points(data: AppData, d: DayLike) -> float:
    """Sum of points of every active habit due on the given day."""
    day = parse_day(d)
    return sum(h.points for h in data.habits if not h.archived and is_due(h, day))


def progress_percent(total: float, ceiling: float) -> int:
    if ceiling <= 0:
        return 0
    # half-up rounding, not banker's rounding
    percent = math.floor(total / ceiling * 100 + 0.5)
    return max(0, min(100, percent))


def daily_progress(data: AppData, d: DayLike) -> dict:
    total = daily_points(data, d)
    ceiling = ceiling_points(data, d)
    return {
        "date": day_key(d),
        "points": total,
        "ceiling": ceiling,
        "percent": progress_percent(total, ceiling),
    }


# =========================
# Heatmap
# =========================

def heatmap(data: AppData, today: Optional[DayLike] = None) -> dict:
    """
    Trailing 91-day window grouped into Sunday-first week columns.

    Returns a dict:
      {
        "start": "YYYY-MM-DD",
        "end": "YYYY-MM-DD",
        "max_points": number,
        "weeks": [[{"date": str | None, "points": number}, ...], ...]
      }

    The first column is left-padded with {"date": None, "points": -1} cells so
    that every real day sits in its weekday row. The last column may be short.
    Cell points cover every habit, regardless of any habit filter.
    """
    end = parse_day(today or date.today())
    start = end - timedelta(days=HEATMAP_DAYS)
    totals = points_by_day(data)

    weeks: List[List[dict]] = []
    current_week = [{"date": None, "points": PADDING} for _ in range((start.weekday() + 1) % 7)]
    for key in date_range(start, end):
        current_week.append({"date": key, "points": totals.get(key, 0)})
        if len(current_week) == 7:
            weeks.append(current_week)
            current_week = []
    if current_week:
        weeks.append(current_week)

    max_points = max([HEATMAP_MIN_MAX] + [cell["points"] for week in weeks for cell in week])
    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "max_points": max_points,
        "weeks": weeks,
    }


def heat_intensity(points: float, max_points: float) -> float:
    denominator = max(max_points, HEATMAP_MIN_MAX) * HEATMAP_SCALE
    return min(1, points / denominator)


def heat_color(points: float, max_points: float) -> str:
    if points == PADDING:
        return PADDING_COLOR
    if points == 0:
        return ZERO_COLOR
    alpha = 0.1 + heat_intensity(points, max_points) * 0.9
    return f"rgba(16, 185, 129, {round(alpha, 3)})"


# =========================
# Trend and distribution
# =========================

def trend_series(
    data: AppData, start: DayLike, end: DayLike, habit_id: str = ALL_HABITS
) -> List[dict]:
    """One {"date", "points"} entry per day of the inclusive range."""
    totals = points_by_day(data, habit_id)
    return [{"date": key, "points": totals.get(key, 0)} for key in date_range(start, end)]


def trend_for_last_days(
    data: AppData, days: int, today: Optional[DayLike] = None, habit_id: str = ALL_HABITS
) -> List[dict]:
    end = parse_day(today or date.today())
    try:
        start = end - timedelta(days=days)
    except OverflowError:
        raise ValidationError(f"Cannot look back {days} days from {end.isoformat()}.")
    return trend_series(data, start, end, habit_id)


def distribution(data: AppData, habit_id: str = ALL_HABITS) -> List[dict]:
    """
    All-time points grouped by habit name.

    Unlike the trend this is not limited to a date range. Logs of deleted
    habits are left out because they have no name to group under.
    """
    lookup = data.habit_lookup()
    totals: Dict[str, float] = {}
    for log in data.logs:
        if not _matches(log, habit_id):
            continue
        habit = lookup.get(log.habit_id)
        if habit is None:
            continue
        totals[habit.name] = totals.get(habit.name, 0) + log.count * habit.points
    return [{"name": name, "value": value} for name, value in totals.items()]


# =========================
# Dashboard views
# =========================

def uses_counter(habit) -> bool:
    """Habits with a goal above one, or weekly ones, are driven by +/- buttons."""
    return habit.repeat_goal > 1 or habit.repeat_type == "weekly"


def today_board(data: AppData, d: Optional[DayLike] = None) -> List[dict]:
    key = day_key(d or date.today())
    counts = {log.habit_id: log.count for log in data.logs if log.date == key}
    rows = []
    for habit in data.habits:
        if habit.archived:
            continue
        count = counts.get(habit.id, 0)
        rows.append(
            {
                "id": habit.id,
                "name": habit.name,
                "color": habit.color,
                "points": habit.points,
                "goal": habit.repeat_goal,
                "count": count,
                "done": count > 0,
                "due": is_due(habit, key),
                "counter": uses_counter(habit),
            }
        )
    return rows


def week_start(d: DayLike) -> date:
    """Sunday that opens the week containing d."""
    day = parse_day(d)
    return day - timedelta(days=(day.weekday() + 1) % 7)


def weekly_goal_progress(data: AppData, habit_id: str, d: Optional[DayLike] = None) -> dict:
    start = week_start(d or date.today())
    end = start + timedelta(days=6)
    days = set(date_range(start, end))
    habit = data.habit_lookup().get(habit_id)
    goal = habit.repeat_goal if habit else 0
    count = sum(log.count for log in data.logs if log.habit_id == habit_id and log.date in days)
    return {
        "habit_id": habit_id,
        "week_start": start.isoformat(),
        "count": count,
        "goal": goal,
        "percent": progress_percent(count, goal),
        "met": goal > 0 and count >= goal,
    }


# =========================
# Streaks
# =========================

def _count_forward_streak(dates_set, start_date):
    length = 1
    curr = start_date
    while curr + timedelta(days=1) in dates_set:
        curr += timedelta(days=1)
        length += 1
    return length


def longest_streak(dates) -> int:
    if not dates:
        return 0
    dates_set = set(dates)
    longest = 0
    for current_date in dates_set:
        if current_date - timedelta(days=1) in dates_set:
            continue  # not the first day of a run
        longest = max(longest, _count_forward_streak(dates_set, current_date))
    return longest


def current_streak(dates, today: date) -> int:
    """Consecutive logged days ending today; 0 if today has no log."""
    dates_set = set(dates)
    length = 0
    curr = today
    while curr in dates_set:
        length += 1
        curr -= timedelta(days=1)
    return length


def _logged_dates(data: AppData, habit_id: str) -> List[date]:
    """Days with a positive log for the habit; unparseable dates are skipped."""
    dates = []
    for log in data.logs:
        if log.habit_id != habit_id or log.count <= 0:
            continue
        try:
            dates.append(parse_day(log.date))
        except ValidationError:
            continue
    return dates


def streaks(data: AppData, habit_id: str, today: Optional[DayLike] = None) -> dict:
    dates = _logged_dates(data, habit_id)
    return {
        "habit_id": habit_id,
        "current": current_streak(dates, parse_day(today or date.today())),
        "longest": longest_streak(dates),
    }
