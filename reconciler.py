# reconciler.py
"""Merge a single completion update into the log collection.

Logs are keyed by (habit_id, date). An update with a positive count replaces
the matching entry in place or appends a new one; a count of zero or less
removes the matching entry. The input sequence is never modified.
"""

from collections.abc import Mapping
from typing import Iterable, Tuple, Union

from errors import ValidationError
from models import HabitLog, day_key, generate_id

Incoming = Union[HabitLog, Mapping]


def _unpack(incoming: Incoming):
    if isinstance(incoming, HabitLog):
        return incoming.habit_id, incoming.date, incoming.count, incoming.id
    if not isinstance(incoming, Mapping):
        raise ValidationError("Log update must be a HabitLog or a mapping.")
    return (
        incoming.get("habitId"),
        incoming.get("date"),
        incoming.get("count"),
        incoming.get("id"),
    )


def _validate(habit_id, raw_date, count) -> Tuple[str, str, int]:
    if not isinstance(habit_id, str) or not habit_id.strip():
        raise ValidationError("Log update needs a non-empty 'habitId'.")
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValidationError(f"Log count must be an integer, got {count!r}.")
    return habit_id, day_key(raw_date), count


def find_log(logs: Iterable[HabitLog], habit_id: str, day: str):
    """Return (index, log) for the (habit_id, day) pair, or (-1, None)."""
    for idx, log in enumerate(logs):
        if log.habit_id == habit_id and log.date == day:
            return idx, log
    return -1, None


def reconcile(existing: Iterable[HabitLog], incoming: Incoming) -> Tuple[HabitLog, ...]:
    habit_id, raw_date, count, log_id = _unpack(incoming)
    habit_id, day, count = _validate(habit_id, raw_date, count)

    logs = list(existing)
    idx, current = find_log(logs, habit_id, day)

    if current is not None:
        if count <= 0:
            del logs[idx]
        else:
            logs[idx] = HabitLog(id=log_id or current.id, habit_id=habit_id, date=day, count=count)
    elif count > 0:
        logs.append(HabitLog(id=generate_id(), habit_id=habit_id, date=day, count=count))

    return tuple(logs)
