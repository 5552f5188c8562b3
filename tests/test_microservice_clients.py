from __future__ import annotations

import json
from datetime import date

import pytest

import microservice_clients
from config import Settings
from conftest import make_habit, make_log
from microservices.analytics_service import handle_message
from models import AppData

SETTINGS = Settings(analytics_port=5999, analytics_timeout_ms=50)


@pytest.fixture
def in_process(monkeypatch):
    """Route client calls straight into the service handler."""
    sent = []

    def fake_send(payload, settings):
        sent.append(payload)
        raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        return json.loads(handle_message(raw).decode("utf-8")), None

    monkeypatch.setattr(microservice_clients, "_send_bytes", fake_send)
    return sent


def _data():
    return AppData(habits=(make_habit("A", points=5),), logs=(make_log("A", "2024-01-10"),))


def test_progress_overview_round_trip(in_process):
    result, error = microservice_clients.progress_overview(_data(), "2024-01-10", SETTINGS)

    assert error is None
    assert result["progress"]["percent"] == 100
    assert in_process[0]["request_type"] == "progress"
    assert in_process[0]["data"]["habits"][0]["id"] == "A"


def test_none_fields_are_not_sent(in_process):
    microservice_clients.heatmap_overview(_data(), None, SETTINGS)
    assert "today" not in in_process[0]


def test_service_errors_are_returned_not_raised(in_process):
    result, error = microservice_clients.trend_overview(_data(), days=-3, settings=SETTINGS)
    assert result is None
    assert "non-negative" in error


def test_gather_snapshot_collects_every_view(in_process):
    snapshot = microservice_clients.gather_analytics_snapshot(
        _data(), days=7, today=date(2024, 1, 10), settings=SETTINGS
    )

    assert set(snapshot) == {"progress", "heatmap", "trend", "distribution", "streaks"}
    assert all(entry["error"] is None for entry in snapshot.values())
    assert snapshot["streaks"]["result"] == [{"habit_id": "A", "current": 1, "longest": 1}]
    assert len(snapshot["trend"]["result"]) == 8


def test_transport_failure_becomes_error(monkeypatch):
    monkeypatch.setattr(
        microservice_clients, "_send_bytes", lambda payload, settings: (None, "Timed out contacting service on port 5999.")
    )
    result, error = microservice_clients.distribution_overview(_data(), settings=SETTINGS)
    assert result is None
    assert error.startswith("Timed out")


def test_no_service_running_times_out():
    # nothing listens on this port; the REQ socket gives up after the timeout
    result, error = microservice_clients.streaks_overview(_data(), "2024-01-10", SETTINGS)
    assert result is None
    assert "5999" in error


@pytest.mark.parametrize("reply", [[], "ok", 3])
def test_non_object_reply_becomes_error(monkeypatch, reply):
    monkeypatch.setattr(microservice_clients, "_send_bytes", lambda payload, settings: (reply, None))

    result, error = microservice_clients.progress_overview(_data(), "2024-01-10", SETTINGS)

    assert result is None
    assert "Malformed progress reply" in error
    assert microservice_clients.stop_service(SETTINGS) is False
