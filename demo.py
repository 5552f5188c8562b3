# demo.py
"""Sample habits with ~90 days of plausible history for a first run."""

import random
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from models import AppData, Habit, HabitLog, date_range, generate_id, is_due

DEMO_DAYS = 90

_DEMO_HABITS = [
    # name, description, color, points, repeat type, goal, days
    ("Morning Jog", "30 mins around the park", "#10b981", 5, "daily", 1, ()),
    ("Read Book", "At least 10 pages", "#3b82f6", 2, "daily", 1, ()),
    ("Deep Work", "2 hours of focused coding", "#8b5cf6", 10, "specific_days", 1,
     ("Mon", "Tue", "Wed", "Thu", "Fri")),
    ("Meditation", "Mindfulness session", "#f59e0b", 3, "weekly", 4, ()),
]


def generate_demo_data(today: Optional[date] = None, rng: Optional[random.Random] = None) -> AppData:
    today = today or date.today()
    rng = rng or random.Random()
    start = today - timedelta(days=DEMO_DAYS)
    created_at = datetime.combine(start, time(), tzinfo=timezone.utc).isoformat()

    habits = tuple(
        Habit(
            id=generate_id(),
            name=name,
            description=description,
            color=color,
            points=points,
            repeat_type=repeat_type,
            repeat_goal=goal,
            repeat_days=days,
            created_at=created_at,
        )
        for name, description, color, points, repeat_type, goal, days in _DEMO_HABITS
    )

    logs = []
    for key in date_range(start, today):
        for habit in habits:
            chance = 0.7
            if habit.repeat_type == "specific_days" and not is_due(habit, key):
                chance = 0.05  # off days are rare
            if rng.random() < chance:
                count = rng.randint(1, 2) if habit.name == "Read Book" else 1
                logs.append(HabitLog(id=generate_id(), habit_id=habit.id, date=key, count=count))

    return AppData(habits=habits, logs=tuple(logs), theme="light")
