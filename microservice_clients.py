"""Helpers to call the analytics microservice from the application."""

from __future__ import annotations

import json
from datetime import date
from typing import Optional

import zmq

from config import Settings
from models import AppData

_CONTEXT = zmq.Context.instance()


# ---------- Low-level send helper ----------
def _make_socket(settings: Settings):
    socket = _CONTEXT.socket(zmq.REQ)
    socket.setsockopt(zmq.RCVTIMEO, settings.analytics_timeout_ms)
    socket.setsockopt(zmq.SNDTIMEO, settings.analytics_timeout_ms)
    socket.setsockopt(zmq.LINGER, 0)
    socket.connect(f"tcp://{settings.analytics_host}:{settings.analytics_port}")
    return socket


def _send_bytes(payload, settings: Settings):
    socket = _make_socket(settings)
    port = settings.analytics_port
    try:
        if isinstance(payload, bytes):
            socket.send(payload)
        else:
            socket.send_string(json.dumps(payload))
        raw = socket.recv()
        return json.loads(raw.decode("utf-8")), None
    except zmq.error.Again:
        return None, f"Timed out contacting service on port {port}."
    except (zmq.ZMQError, ValueError) as exc:
        return None, f"Service error on port {port}: {exc}"
    finally:
        socket.close()


def _request(request_type: str, data: AppData, settings: Optional[Settings] = None, **fields):
    payload = {"request_type": request_type, "data": data.to_dict()}
    payload.update({k: v for k, v in fields.items() if v is not None})
    response, error = _send_bytes(payload, settings or Settings.from_env())
    if error:
        return None, error
    if not isinstance(response, dict):
        return None, f"Malformed {request_type} reply: expected a JSON object."
    if response.get("status") != "ok":
        return None, response.get("error", f"Unknown {request_type} error.")
    return response.get("result"), None


# ---------- Microservice callers ----------
def progress_overview(data: AppData, day: Optional[str] = None, settings: Optional[Settings] = None):
    """Today's points, ceiling and percent plus the per-habit board."""
    return _request("progress", data, settings, date=day)


def heatmap_overview(data: AppData, today: Optional[str] = None, settings: Optional[Settings] = None):
    return _request("heatmap", data, settings, today=today)


def trend_overview(
    data: AppData,
    days: int = 30,
    habit_id: str = "all",
    today: Optional[str] = None,
    settings: Optional[Settings] = None,
):
    return _request("trend", data, settings, days=days, habit_id=habit_id, today=today)


def distribution_overview(data: AppData, habit_id: str = "all", settings: Optional[Settings] = None):
    return _request("distribution", data, settings, habit_id=habit_id)


def streaks_overview(data: AppData, today: Optional[str] = None, settings: Optional[Settings] = None):
    return _request("streaks", data, settings, today=today)


def stop_service(settings: Optional[Settings] = None):
    response, error = _send_bytes(b"q", settings or Settings.from_env())
    return error is None and isinstance(response, dict) and response.get("status") == "ok"


# ---------- Public aggregation ----------
def gather_analytics_snapshot(
    data: AppData,
    days: int = 30,
    habit_id: str = "all",
    today: Optional[date] = None,
    settings: Optional[Settings] = None,
):
    """
    Collects all analytics data in one pass so a caller can refresh quickly.
    Returns a dict with keys: progress, heatmap, trend, distribution, streaks,
    each holding {"result": ..., "error": ...}.
    """
    settings = settings or Settings.from_env()
    day = (today or date.today()).isoformat()
    calls = {
        "progress": lambda: progress_overview(data, day, settings),
        "heatmap": lambda: heatmap_overview(data, day, settings),
        "trend": lambda: trend_overview(data, days, habit_id, day, settings),
        "distribution": lambda: distribution_overview(data, habit_id, settings),
        "streaks": lambda: streaks_overview(data, day, settings),
    }
    snapshot = {}
    for name, call in calls.items():
        result, error = call()
        snapshot[name] = {"result": result, "error": error}
    return snapshot
