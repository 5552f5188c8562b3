#!/usr/bin/env python3
"""ZeroMQ REP service answering analytics questions about an AppData snapshot.

Request (JSON object):
  {
    "request_type": "progress" | "heatmap" | "trend" | "distribution" | "streaks",
    "data": {"habits": [...], "logs": [...], "theme": "light"},
    ...per-type fields
  }

Response: {"status": "ok", "request_type": ..., "result": ...}
      or: {"status": "error", "error": "..."}
"""

import json
import logging
from datetime import date

import zmq

import analytics
from config import Settings, configure_logging
from errors import ValidationError
from models import AppData

logger = logging.getLogger(__name__)

REQUEST_TYPES = ("progress", "heatmap", "trend", "distribution", "streaks")


# =========================
# Request handlers
# =========================

def _progress(data, request):
    day = request.get("date") or date.today()
    return {
        "progress": analytics.daily_progress(data, day),
        "board": analytics.today_board(data, day),
    }


def _heatmap(data, request):
    return analytics.heatmap(data, request.get("today"))


def _trend(data, request):
    habit_id = request.get("habit_id", analytics.ALL_HABITS)
    if "days" in request:
        days = request["days"]
        if isinstance(days, bool) or not isinstance(days, int) or days < 0:
            raise ValidationError("'days' must be a non-negative integer.")
        return analytics.trend_for_last_days(data, days, request.get("today"), habit_id)
    start, end = request.get("start"), request.get("end")
    if not start or not end:
        raise ValidationError("'trend' needs either 'days' or both 'start' and 'end'.")
    return analytics.trend_series(data, start, end, habit_id)


def _distribution(data, request):
    return analytics.distribution(data, request.get("habit_id", analytics.ALL_HABITS))


def _streaks(data, request):
    today = request.get("today")
    habit_id = request.get("habit_id")
    if habit_id:
        return [analytics.streaks(data, habit_id, today)]
    return [analytics.streaks(data, h.id, today) for h in data.habits]


HANDLERS = {
    "progress": _progress,
    "heatmap": _heatmap,
    "trend": _trend,
    "distribution": _distribution,
    "streaks": _streaks,
}


# =========================
# Request / response helpers
# =========================

def make_error_response(message):
    return {
        "status": "error",
        "error": message
    }


def make_success_response(request_type, result):
    return {
        "status": "ok",
        "request_type": request_type,
        "result": result
    }


def serialize_response(response_dict):
    """
    Deterministic JSON encoding:
      - sort_keys=True → stable key order
      - separators=(',', ':') → no extra spaces
    """
    return json.dumps(
        response_dict,
        sort_keys=True,
        separators=(",", ":")
    ).encode("utf-8")


def parse_request_bytes(raw_bytes):
    """
    Decode raw bytes into a Python dict, or return an error response.
    """
    try:
        request = json.loads(raw_bytes.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None, make_error_response("Invalid JSON in request body.")
    if not isinstance(request, dict):
        return None, make_error_response("Request body must be a JSON object.")
    return request, None


def validate_request(request):
    """
    Validate top-level request structure.
    Returns (request_type, data, error_or_none).
    """
    request_type = request.get("request_type")
    if request_type not in REQUEST_TYPES:
        return None, None, make_error_response(
            f"Unsupported request_type. Expected one of: {', '.join(REQUEST_TYPES)}."
        )

    try:
        data = AppData.from_dict(request.get("data"))
    except ValidationError as exc:
        return None, None, make_error_response(f"Invalid 'data': {exc}")

    return request_type, data, None


def handle_message(raw_bytes):
    """
    Pure handler: bytes in → bytes out.
    Use this for unit tests.
    """
    request, parse_error = parse_request_bytes(raw_bytes)
    if parse_error is not None:
        return serialize_response(parse_error)

    request_type, data, validation_error = validate_request(request)
    if validation_error is not None:
        return serialize_response(validation_error)

    try:
        result = HANDLERS[request_type](data, request)
    except ValidationError as exc:
        return serialize_response(make_error_response(str(exc)))

    return serialize_response(make_success_response(request_type, result))


# =========================
# ZeroMQ server & quit logic
# =========================

def create_socket(port):
    context = zmq.Context()
    socket = context.socket(zmq.REP)
    socket.bind(f"tcp://*:{port}")
    return context, socket


def is_quit_signal(raw_request: bytes) -> bool:
    """A raw b"q" or the JSON string "q" asks the service to stop."""
    trimmed = raw_request.strip().lower()
    return trimmed in (b"q", b'"q"')


def run_server(port):
    """
    Main server loop.

    - Normal request: JSON → handled by handle_message().
    - Quit request: 'q' → respond once, then exit.
    """
    context, socket = create_socket(port)
    logger.info("Analytics service listening on port %s", port)

    try:
        while True:
            raw_request = socket.recv()

            if is_quit_signal(raw_request):
                socket.send(serialize_response({
                    "status": "ok",
                    "message": "Analytics service shutting down."
                }))
                logger.info("Received quit signal, exiting")
                break

            try:
                response_bytes = handle_message(raw_request)
            except Exception as e:
                logger.exception("Internal error while handling request")
                response_bytes = serialize_response(make_error_response(f"Internal error: {e}"))

            socket.send(response_bytes)

    except KeyboardInterrupt:
        logger.info("Interrupted via keyboard")
    finally:
        socket.close()
        context.term()


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    run_server(settings.analytics_port)


if __name__ == "__main__":
    main()
