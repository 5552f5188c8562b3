from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from errors import PersistenceError  # noqa: E402
from models import AppData, Habit, HabitLog  # noqa: E402


class MemoryRepo:
    """In-memory stand-in for JSONRepo; can be told to fail on save."""

    def __init__(self, data=None, fail_saves=False):
        self.stored = data
        self.fail_saves = fail_saves
        self.saves = 0

    def load(self):
        return self.stored

    def save(self, data):
        if self.fail_saves:
            raise PersistenceError("disk full")
        self.saves += 1
        self.stored = data


def make_habit(habit_id="A", points=5, repeat_type="daily", days=(), goal=1, archived=False, name=None):
    return Habit(
        id=habit_id,
        name=name or f"Habit {habit_id}",
        points=points,
        repeat_type=repeat_type,
        repeat_goal=goal,
        repeat_days=tuple(days),
        created_at="2024-01-01T00:00:00+00:00",
        archived=archived,
    )


def make_log(habit_id="A", day="2024-01-01", count=1, log_id=None):
    return HabitLog(id=log_id or f"{habit_id}-{day}", habit_id=habit_id, date=day, count=count)


@pytest.fixture
def empty_data():
    return AppData(habits=(), logs=(), theme="light")


@pytest.fixture
def memory_repo():
    return MemoryRepo(AppData())
