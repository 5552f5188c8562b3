from __future__ import annotations

from datetime import date, timedelta

import pytest

from conftest import make_habit
from errors import ValidationError
from models import WEEK, date_range, is_due, parse_day, weekday_tag

# 2024-01-07 is a Sunday
A_WEEK = [(date(2024, 1, 7) + timedelta(days=i)).isoformat() for i in range(7)]


def test_weekday_tags_are_sunday_first():
    assert [weekday_tag(parse_day(d)) for d in A_WEEK] == WEEK
    assert weekday_tag(date(2024, 1, 1)) == "Mon"


def test_daily_habit_is_due_every_day():
    habit = make_habit(repeat_type="daily")
    start = date(2023, 12, 25)
    assert all(is_due(habit, start + timedelta(days=i)) for i in range(60))


def test_specific_days_follow_repeat_days():
    habit = make_habit(repeat_type="specific_days", days=("Mon", "Wed", "Fri"))
    due = [weekday_tag(parse_day(d)) for d in A_WEEK if is_due(habit, d)]
    assert due == ["Mon", "Wed", "Fri"]


def test_specific_days_without_days_is_never_due():
    habit = make_habit(repeat_type="specific_days", days=())
    assert not any(is_due(habit, d) for d in A_WEEK)


def test_weekly_habit_is_due_every_day_regardless_of_goal():
    habit = make_habit(repeat_type="weekly", goal=3)
    assert all(is_due(habit, d) for d in A_WEEK)


def test_unknown_repeat_type_is_not_due():
    habit = make_habit(repeat_type="monthly")
    assert is_due(habit, "2024-01-01") is False


def test_accepts_date_objects_and_strings():
    habit = make_habit(repeat_type="specific_days", days=("Mon",))
    assert is_due(habit, date(2024, 1, 1))
    assert is_due(habit, "2024-01-01")


@pytest.mark.parametrize("bad", ["2024-13-01", "2024-02-30", "01/01/2024", "2024-1-1", "2024-01-01\n", "\u0662\u0660\u0662\u0664-01-01", "", None, 20240101])
def test_malformed_dates_raise_validation_error(bad):
    with pytest.raises(ValidationError):
        is_due(make_habit(), bad)


def test_date_range_is_inclusive_and_empty_when_reversed():
    assert date_range("2024-02-28", "2024-03-01") == ["2024-02-28", "2024-02-29", "2024-03-01"]
    assert date_range("2024-01-02", "2024-01-01") == []
