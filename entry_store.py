# entry_store.py
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from errors import MalformedStoredData, StoreUnavailable
from models import HabitEntry
from repo_json import JSONStore
from settings import ENTRIES_KEY

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class EntryStore:
    """Durable map of date -> HabitEntry, kept as a single JSON object."""

    def __init__(self, store: JSONStore):
        self.store = store

    def _read(self) -> Dict[str, HabitEntry]:
        """Full map, sanitized on the way out. Any failure reads as empty."""
        if not self.store.is_available():
            logger.error("Entry store is unavailable; reading as empty.")
            return {}
        try:
            raw = self.store.read_json(ENTRIES_KEY)
        except (StoreUnavailable, MalformedStoredData) as exc:
            logger.error("Failed to read stored entries, resetting: %s", exc)
            return {}
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.error("Stored entries are malformed (expected an object), resetting.")
            return {}

        entries = {}
        for key, value in raw.items():
            if not isinstance(value, dict):
                logger.warning("Ignoring malformed stored entry for %s", key)
                continue
            entry = HabitEntry.from_dict(value)
            if not entry.date:
                entry.date = key
            entries[key] = entry
        return entries

    def _write(self, entries: Dict[str, HabitEntry]) -> None:
        if not self.store.is_available():
            logger.error("Entry store is unavailable; entry not saved.")
            return
        try:
            self.store.write_json(ENTRIES_KEY, {date: e.to_dict() for date, e in entries.items()})
        except StoreUnavailable as exc:
            logger.error("Entry not saved: %s", exc)

    # -------- Public API --------
    def save_entry(self, entry: HabitEntry) -> None:
        """Saves (or overwrites) the entry under its date."""
        entries = self._read()
        entries[entry.date] = entry
        self._write(entries)

    def save_edited_entry(self, entry: HabitEntry, now: Optional[str] = None) -> HabitEntry:
        """Edit-mode save: stamps lastEdited, then overwrites."""
        entry.last_edited = now or now_iso()
        self.save_entry(entry)
        return entry

    def get_entry(self, date: str) -> Optional[HabitEntry]:
        return self._read().get(date)

    def has_entry(self, date: str) -> bool:
        return self.get_entry(date) is not None

    def get_all_entries(self) -> List[HabitEntry]:
        """All entries, oldest first."""
        return sorted(self._read().values(), key=lambda e: e.date)

    def clear_all_entries(self) -> None:
        try:
            self.store.remove_item(ENTRIES_KEY)
        except StoreUnavailable as exc:
            logger.error("Could not clear entries: %s", exc)
