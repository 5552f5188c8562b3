from __future__ import annotations

import pytest

from conftest import make_log
from errors import ValidationError
from models import HabitLog
from reconciler import find_log, reconcile


def test_append_to_empty_generates_id():
    logs = reconcile([], {"habitId": "A", "date": "2024-01-01", "count": 2})

    assert len(logs) == 1
    entry = logs[0]
    assert (entry.habit_id, entry.date, entry.count) == ("A", "2024-01-01", 2)
    assert entry.id


def test_zero_count_removes_existing_entry():
    existing = [HabitLog(id="x", habit_id="A", date="2024-01-01", count=1)]
    assert reconcile(existing, {"habitId": "A", "date": "2024-01-01", "count": 0}) == ()


def test_negative_count_removes_existing_entry():
    existing = [make_log("A", "2024-01-01", 3)]
    assert reconcile(existing, {"habitId": "A", "date": "2024-01-01", "count": -1}) == ()


def test_zero_count_without_entry_is_noop():
    existing = [make_log("A", "2024-01-01", 1)]
    logs = reconcile(existing, {"habitId": "B", "date": "2024-01-01", "count": 0})
    assert logs == tuple(existing)


def test_replace_keeps_position_and_identity():
    existing = [make_log("A", "2024-01-01"), make_log("B", "2024-01-01"), make_log("C", "2024-01-01")]
    logs = reconcile(existing, {"habitId": "B", "date": "2024-01-01", "count": 4})

    assert [l.habit_id for l in logs] == ["A", "B", "C"]
    assert logs[1].count == 4
    assert logs[1].id == existing[1].id


def test_replace_uses_incoming_id_when_given():
    existing = [make_log("A", "2024-01-01", log_id="old")]
    logs = reconcile(existing, {"habitId": "A", "date": "2024-01-01", "count": 2, "id": "new"})
    assert logs[0].id == "new"


def test_habit_log_can_be_passed_directly():
    existing = [make_log("A", "2024-01-01", log_id="x")]
    logs = reconcile(existing, HabitLog(id="", habit_id="A", date="2024-01-01", count=5))
    assert logs == (HabitLog(id="x", habit_id="A", date="2024-01-01", count=5),)


def test_sequential_updates_never_duplicate_pair():
    logs = ()
    for count in (1, 2, 5, 3, 1):
        logs = reconcile(logs, {"habitId": "A", "date": "2024-01-01", "count": count})
        assert len([l for l in logs if (l.habit_id, l.date) == ("A", "2024-01-01")]) == 1
    assert logs[0].count == 1


def test_input_is_not_mutated():
    existing = [make_log("A", "2024-01-01")]
    snapshot = list(existing)
    reconcile(existing, {"habitId": "A", "date": "2024-01-01", "count": 0})
    reconcile(existing, {"habitId": "B", "date": "2024-01-01", "count": 1})
    assert existing == snapshot


def test_new_entries_get_distinct_ids():
    logs = ()
    for day in ("2024-01-01", "2024-01-02", "2024-01-03"):
        logs = reconcile(logs, {"habitId": "A", "date": day, "count": 1})
    assert len({l.id for l in logs}) == 3


def test_date_objects_are_normalised_to_day_keys():
    from datetime import date

    logs = reconcile([], {"habitId": "A", "date": date(2024, 1, 5), "count": 1})
    assert find_log(logs, "A", "2024-01-05")[1] is not None


@pytest.mark.parametrize(
    "incoming",
    [
        {"habitId": "", "date": "2024-01-01", "count": 1},
        {"habitId": "A", "date": "not-a-date", "count": 1},
        {"habitId": "A", "date": "2024-01-01", "count": "2"},
        {"habitId": "A", "date": "2024-01-01", "count": True},
        "A",
    ],
)
def test_invalid_updates_are_rejected(incoming):
    with pytest.raises(ValidationError):
        reconcile([], incoming)
