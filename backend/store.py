"""
Key-value store backing the tutor settings.

Only two scalar strings live here (the API key and the preferred model),
so a plain dict is enough. JsonFileStore mirrors the dict to disk so the
settings survive a restart; MemoryStore is used when no path is configured.
"""

import json
import logging
import os
import tempfile
from typing import Optional

logger = logging.getLogger(__name__)

API_KEY = "tutor.api_key"
SELECTED_MODEL = "tutor.selected_model"


class MemoryStore:
    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore(MemoryStore):
    """Dict persisted as a JSON object; rewritten on every set()."""

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self._data = self._load()

    def _load(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read settings from %s, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def set(self, key: str, value: str) -> None:
        """Write the updated dict to a temp file, then swap it in; memory follows disk."""
        data = dict(self._data)
        data[key] = value

        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".settings-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        self._data = data


def open_store(path: Optional[str] = None) -> MemoryStore:
    """Pick the store from TUTOR_STORE_PATH; in-memory when unset."""
    path = path or os.environ.get("TUTOR_STORE_PATH")
    if path:
        return JsonFileStore(path)
    return MemoryStore()
