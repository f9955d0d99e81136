"""Preferred display-name storage.

A small key-value surface that remembers the name a person last typed,
so the name-entry form can be pre-filled next time. It is not part of
rotation state.
"""

import json
import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

PLAYER_NAME_KEY = "gotnext_player_name"


class InMemoryNameStore:
    """Name store that forgets everything on restart."""

    def __init__(self):
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        name = value.strip()
        if name:
            self._items[key] = name

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileNameStore:
    """Name store backed by a single JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load display names from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed display name file {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(items, f, indent=2, sort_keys=True)

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        name = value.strip()
        if not name:
            return
        with self._lock:
            items = self._load()
            items[key] = name
            self._save(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._load()
            if items.pop(key, None) is not None:
                self._save(items)


def name_key(client_id: str | None = None) -> str:
    """Storage key for a client's preferred name."""
    if not client_id:
        return PLAYER_NAME_KEY
    return f"{PLAYER_NAME_KEY}:{client_id}"
