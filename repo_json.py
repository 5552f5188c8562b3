# repo_json.py
"""Key-value JSON file holding the persisted AppData snapshot."""

import json
import logging
import os
from typing import Optional

from errors import PersistenceError, ValidationError
from models import AppData

logger = logging.getLogger(__name__)

STORAGE_KEY = "habitpulse_data_v1"


class JSONRepo:
    def __init__(self, path: str, key: str = STORAGE_KEY):
        self.path = path
        self.key = key

    def _read(self) -> dict:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, obj):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(obj, f, indent=2, ensure_ascii=False)
        os.replace(tmp, self.path)

    def _quarantine(self):
        """Move an unreadable file aside so the next save does not overwrite it."""
        backup = self.path + ".corrupt"
        try:
            os.replace(self.path, backup)
            logger.warning("Corrupt data file moved to %s", backup)
        except OSError as exc:
            logger.warning("Could not move corrupt data file %s: %s", self.path, exc)

    # -------- Load / Save --------
    def load(self) -> Optional[AppData]:
        """Stored snapshot, or None when nothing usable is stored."""
        if not os.path.exists(self.path):
            return None
        try:
            stored = self._read()
        except (json.JSONDecodeError, UnicodeDecodeError):
            self._quarantine()
            return None
        except OSError as exc:
            logger.warning("Could not read %s: %s", self.path, exc)
            return None

        raw = stored.get(self.key) if isinstance(stored, dict) else None
        if raw is None:
            return None
        try:
            return AppData.from_dict(raw)
        except ValidationError as exc:
            logger.warning("Stored data under '%s' is invalid: %s", self.key, exc)
            self._quarantine()
            return None

    def save(self, data: AppData):
        stored = {}
        if os.path.exists(self.path):
            try:
                existing = self._read()
                if isinstance(existing, dict):
                    stored = existing
            except (OSError, json.JSONDecodeError, UnicodeDecodeError):
                stored = {}
        stored[self.key] = data.to_dict()
        try:
            self._write(stored)
        except OSError as exc:
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc
