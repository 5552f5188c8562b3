# transfer.py
"""JSON import/export of a whole AppData snapshot."""

import json
from datetime import date
from typing import Optional

from errors import ValidationError
from models import AppData


def export_json(data: AppData) -> str:
    return json.dumps(data.to_dict(), ensure_ascii=False, indent=2)


def export_filename(d: Optional[date] = None) -> str:
    return f"habitpulse_backup_{(d or date.today()).isoformat()}.json"


def parse_import(text) -> AppData:
    """
    Decode backup text into an AppData value.

    Only the outer shape is checked strictly: the payload has to be an object
    with array-typed 'habits' and 'logs'. Raises ValidationError otherwise.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError("Import file is not UTF-8 text.")
    if not isinstance(text, str):
        raise ValidationError("Import payload must be JSON text.")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Failed to parse JSON: {exc.msg}.")
    if not isinstance(raw, dict):
        raise ValidationError("Invalid file format.")
    return AppData.from_dict(raw)
