"""Backup export/import.

Export is a pure serialization of entries + configs. Import validates the
whole document before touching either store, replaces the catalog, then
merges entries without overwriting any date that already exists locally.
"""

import asyncio
import json
import logging
from typing import Dict, List, Tuple

from config_store import ConfigStore, default_configs
from entry_store import EntryStore, now_iso
from errors import InvalidDocument, NoValidEntries, ReadFailure, UnrecognizedFormat
from models import AppConfigs, HabitEntry, is_number

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1


# =========================
# Validation
# =========================

def is_plain_object(value) -> bool:
    return isinstance(value, dict)


def is_habit_state(value) -> bool:
    return (
        is_plain_object(value)
        and isinstance(value.get("done"), bool)
        and isinstance(value.get("joy"), bool)
    )


def is_habit_entry(value) -> bool:
    """Checks every required field of a serialized HabitEntry."""
    if not is_plain_object(value):
        return False
    moments = value.get("moments")
    habits = value.get("habits")
    numeric = value.get("numeric")
    return (
        isinstance(value.get("date"), str)
        and isinstance(value.get("reflection"), str)
        and isinstance(moments, list)
        and all(isinstance(m, str) for m in moments)
        and is_plain_object(habits)
        and all(is_habit_state(s) for s in habits.values())
        and is_plain_object(numeric)
        and all(is_number(v) for v in numeric.values())
        and isinstance(value.get("lastEdited", ""), str)
    )


def is_export_file(value) -> bool:
    if not is_plain_object(value):
        return False
    configs = value.get("configs")
    version = value.get("version")
    return (
        isinstance(version, int)
        and not isinstance(version, bool)
        and version == EXPORT_VERSION
        and isinstance(value.get("entries"), list)
        and is_plain_object(configs)
        and isinstance(configs.get("habits"), list)
        and isinstance(configs.get("moments"), list)
    )


# =========================
# Export
# =========================

def prepare_export_data(entries: List[HabitEntry], configs: AppConfigs) -> str:
    document = {
        "version": EXPORT_VERSION,
        "exportedAt": now_iso(),
        "configs": configs.to_dict(),
        "entries": [e.to_dict() for e in entries],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def export_backup(path: str, entry_store: EntryStore, config_store: ConfigStore) -> int:
    """Writes a backup of both stores to path. Returns the entry count."""
    entries = entry_store.get_all_entries()
    content = prepare_export_data(entries, config_store.get_configs())
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    logger.info("Exported %d entries to %s", len(entries), path)
    return len(entries)


# =========================
# Import
# =========================

def _reject_constant(token):
    raise ValueError(f"{token} is not valid JSON")


def parse_import_file(content: str) -> Tuple[List[HabitEntry], AppConfigs]:
    """Validates a backup document; raises a BackupImportError subclass."""
    try:
        parsed = json.loads(content, parse_constant=_reject_constant)
    except (TypeError, ValueError) as exc:
        raise InvalidDocument() from exc

    if not is_export_file(parsed):
        raise UnrecognizedFormat()

    raw_entries = parsed["entries"]
    valid = [e for e in raw_entries if is_habit_entry(e)]
    dropped = len(raw_entries) - len(valid)
    if dropped:
        logger.warning("Dropped %d invalid entries from import", dropped)
    if raw_entries and not valid:
        raise NoValidEntries()

    return [HabitEntry.from_dict(e) for e in valid], AppConfigs.from_dict(parsed["configs"])


def merge_entries(incoming: List[HabitEntry], entry_store: EntryStore) -> Dict[str, int]:
    """Adds entries for new dates only; existing dates are skipped."""
    imported = 0
    skipped = 0
    for entry in incoming:
        if entry_store.get_entry(entry.date) is not None:
            skipped += 1
        else:
            entry_store.save_entry(entry)
            imported += 1
    return {"imported": imported, "skipped": skipped}


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


async def import_backup(path: str, entry_store: EntryStore, config_store: ConfigStore,
                        reader=_read_text) -> Dict[str, int]:
    """Reads, validates and applies a backup file."""
    loop = asyncio.get_running_loop()
    try:
        content = await loop.run_in_executor(None, reader, path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadFailure() from exc
    if not isinstance(content, str):
        raise ReadFailure()

    entries, configs = parse_import_file(content)
    config_store.save_configs(configs)
    result = merge_entries(entries, entry_store)
    logger.info("Imported %(imported)d entries, skipped %(skipped)d", result)
    return result


def factory_reset(entry_store: EntryStore, config_store: ConfigStore) -> None:
    """Wipes all entries and restores the default catalog."""
    entry_store.clear_all_entries()
    config_store.save_configs(default_configs())
    logger.info("Factory reset done")
