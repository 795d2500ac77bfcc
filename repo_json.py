# repo_json.py
import json
import logging
import os
from typing import Optional

from errors import MalformedStoredData, StoreUnavailable

logger = logging.getLogger(__name__)

PROBE_KEY = "__clarity_test__"


class JSONStore:
    """Key-value store: one text record per key under a data directory."""

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    # -------- Availability --------
    def is_available(self) -> bool:
        try:
            os.makedirs(self.directory, exist_ok=True)
            self.set_item(PROBE_KEY, "1")
            self.remove_item(PROBE_KEY)
            return True
        except (OSError, StoreUnavailable):
            return False

    # -------- Raw records --------
    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreUnavailable(f"Cannot read {path}: {exc}") from exc

    def set_item(self, key: str, text: str) -> None:
        path = self._path(key)
        tmp = path + ".tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, path)
        except OSError as exc:
            raise StoreUnavailable(f"Cannot write {path}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise StoreUnavailable(f"Cannot remove {self._path(key)}: {exc}") from exc

    # -------- JSON records --------
    def read_json(self, key: str):
        """Parsed record, or None when absent."""
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedStoredData(f"Record '{key}' is not valid JSON") from exc

    def write_json(self, key: str, obj) -> None:
        self.set_item(key, json.dumps(obj, ensure_ascii=False))
