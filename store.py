# store.py
"""Single owner of the current AppData snapshot.

Every intent builds a complete new snapshot, publishes it, then hands it to
the repository. A failed save is logged and leaves the new snapshot in place.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from demo import generate_demo_data
from errors import NotFoundError, PersistenceError, ValidationError
from models import THEMES, AppData, DayLike, Habit, day_key
from reconciler import find_log, reconcile
from transfer import export_json, parse_import

logger = logging.getLogger(__name__)


class HabitStore:
    def __init__(self, repo, today: Optional[date] = None):
        self.repo = repo
        self.today = today
        self.last_save_ok = True
        loaded = repo.load()
        if loaded is None:
            logger.info("No stored data found, starting with demo data")
            self._publish(generate_demo_data(today))
        else:
            self.data = loaded

    def _publish(self, data: AppData) -> AppData:
        self.data = data
        try:
            self.repo.save(data)
            self.last_save_ok = True
        except PersistenceError as exc:
            self.last_save_ok = False
            logger.warning("Failed to save data, keeping changes in memory only: %s", exc)
        return data

    # -------- Logs --------
    def update_log(self, habit_id: str, d: DayLike, count: int, log_id: Optional[str] = None) -> AppData:
        incoming = {"habitId": habit_id, "date": d, "count": count, "id": log_id}
        logs = reconcile(self.data.logs, incoming)
        return self._publish(replace(self.data, logs=logs))

    def count_for(self, habit_id: str, d: DayLike) -> int:
        _, log = find_log(self.data.logs, habit_id, day_key(d))
        return log.count if log else 0

    def increment(self, habit_id: str, d: DayLike) -> AppData:
        return self.update_log(habit_id, d, self.count_for(habit_id, d) + 1)

    def decrement(self, habit_id: str, d: DayLike) -> AppData:
        count = self.count_for(habit_id, d)
        if count <= 0:
            return self.data
        return self.update_log(habit_id, d, count - 1)

    def toggle(self, habit_id: str, d: DayLike) -> AppData:
        done = self.count_for(habit_id, d) > 0
        return self.update_log(habit_id, d, 0 if done else 1)

    # -------- Habits --------
    def get_habit(self, habit_id: str) -> Habit:
        for habit in self.data.habits:
            if habit.id == habit_id:
                return habit
        raise NotFoundError(f"No habit with id '{habit_id}'.")

    def save_habit(self, habit: Habit) -> AppData:
        if not isinstance(habit, Habit):
            raise ValidationError("save_habit expects a Habit.")
        if habit.points < 0:
            raise ValidationError("Habit points cannot be negative.")
        habits = list(self.data.habits)
        for idx, existing in enumerate(habits):
            if existing.id == habit.id:
                habits[idx] = habit
                break
        else:
            habits.append(habit)
        return self._publish(replace(self.data, habits=tuple(habits)))

    def delete_habit(self, habit_id: str) -> AppData:
        # logs stay behind so historical totals keep their shape
        habits = tuple(h for h in self.data.habits if h.id != habit_id)
        if len(habits) == len(self.data.habits):
            return self.data
        return self._publish(replace(self.data, habits=habits))

    # -------- Settings --------
    def set_theme(self, theme: str) -> AppData:
        if theme not in THEMES:
            raise ValidationError(f"Theme must be one of {', '.join(THEMES)}.")
        return self._publish(replace(self.data, theme=theme))

    def toggle_theme(self) -> AppData:
        return self.set_theme("light" if self.data.theme == "dark" else "dark")

    def reset_to_demo(self) -> AppData:
        logger.info("Replacing data with demo data")
        return self._publish(generate_demo_data(self.today))

    def clear_all(self) -> AppData:
        logger.info("Clearing all habits and logs")
        return self._publish(AppData(habits=(), logs=(), theme="light"))

    def import_data(self, text) -> AppData:
        data = parse_import(text)
        logger.info("Imported %d habit(s) and %d log(s)", len(data.habits), len(data.logs))
        return self._publish(data)

    def export_data(self) -> str:
        return export_json(self.data)
