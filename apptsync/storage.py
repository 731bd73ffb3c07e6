"""Local key-value state: the sync watermark and the logged-in user."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from typing import Any, Dict, Optional

import config
from .logging_utils import warn
from .models import User

WATERMARK_KEY = "last_processed_appointment_row"
SESSION_KEY = "healthcare_user"
DEFAULT_WATERMARK = 1  # header row


class JsonFileStore:
    """Key-value store persisted as one JSON object.

    Writes go through a temp file and ``os.replace`` so a crash never leaves a
    half-written file. A missing or unreadable file reads as empty.
    """

    def __init__(self, path: str = config.STATE_FILE):
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            warn(f"Could not read state file {self.path}: {e}")
            return {}
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except ValueError:
            warn(f"State file {self.path} is not valid JSON; starting empty.")
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, Any]) -> None:
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".state-", dir=folder)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._dump(data)


class WatermarkStore:
    """Last processed master row. Only ever moves forward."""

    def __init__(self, store: JsonFileStore, key: str = WATERMARK_KEY, default: int = DEFAULT_WATERMARK):
        self.store = store
        self.key = key
        self.default = default
        self._lock = threading.Lock()

    def get(self) -> int:
        raw = self.store.get(self.key)
        if raw is None:
            return self.default
        try:
            return max(int(raw), self.default)
        except (TypeError, ValueError):
            warn(f"Ignoring invalid watermark {raw!r}; using {self.default}.")
            return self.default

    def advance(self, row_index: int) -> int:
        """Move the watermark to ``row_index`` if that is further along."""
        with self._lock:
            current = self.get()
            if row_index > current:
                self.store.set(self.key, int(row_index))
                return int(row_index)
            return current


class SessionStore:
    def __init__(self, store: JsonFileStore, key: str = SESSION_KEY):
        self.store = store
        self.key = key

    def load(self) -> Optional[User]:
        data = self.store.get(self.key)
        if not isinstance(data, dict) or "email" not in data:
            return None
        return User.from_dict(data)

    def save(self, user: User) -> None:
        self.store.set(self.key, user.to_dict())

    def clear(self) -> None:
        self.store.delete(self.key)


__all__ = ["JsonFileStore", "SessionStore", "WatermarkStore", "DEFAULT_WATERMARK"]
