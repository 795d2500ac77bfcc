import json
import logging
from datetime import date

import pytest

import app
from config_store import ConfigStore
from entry_store import EntryStore
from models import HabitEntry, HabitState
from repo_json import JSONStore

from conftest import MEDITATION


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Keeps setup_logger's handlers from leaking out of each test."""
    monkeypatch.setenv("CLARITY_LOG_FILE", str(tmp_path / "logs" / "clarity.log"))
    root = logging.getLogger()
    saved = list(root.handlers)
    yield tmp_path / "data"
    for handler in list(root.handlers):
        if handler not in saved:
            root.removeHandler(handler)
            handler.close()


def _run(data_dir, *argv):
    return app.main(["--data-dir", str(data_dir), *argv])


def test_export_then_import_into_fresh_store(tmp_path, data_dir, capsys):
    EntryStore(JSONStore(str(data_dir))).save_entry(HabitEntry(date="2026-02-24"))
    backup = tmp_path / "habits-backup.json"

    assert _run(data_dir, "export", str(backup)) == 0
    assert json.loads(backup.read_text(encoding="utf-8"))["entries"][0]["date"] == "2026-02-24"

    other = tmp_path / "other"
    assert _run(other, "import", str(backup)) == 0
    assert "Imported 1 entries, skipped 0" in capsys.readouterr().out
    assert EntryStore(JSONStore(str(other))).get_entry("2026-02-24") is not None


def test_import_reports_bad_files(tmp_path, data_dir, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text("nope", encoding="utf-8")
    assert _run(data_dir, "import", str(bad)) == 1
    assert "not valid JSON" in capsys.readouterr().err


def test_reset_requires_confirmation(data_dir):
    store = JSONStore(str(data_dir))
    EntryStore(store).save_entry(HabitEntry(date="2026-02-24"))
    assert _run(data_dir, "reset") == 1
    assert EntryStore(store).get_all_entries()
    assert _run(data_dir, "reset", "--yes") == 0
    assert EntryStore(store).get_all_entries() == []
    assert ConfigStore(store).get_configs().moments


def test_calendar_and_frequency_print(data_dir, capsys):
    EntryStore(JSONStore(str(data_dir))).save_entry(HabitEntry(date="2026-02-24"))
    assert _run(data_dir, "calendar", "2026", "2") == 0
    assert "#" in capsys.readouterr().out
    assert _run(data_dir, "frequency") == 0
    assert "Nothing logged" in capsys.readouterr().out


def test_frequency_month_defaults_to_current_month(data_dir, capsys):
    today = date.today().isoformat()
    EntryStore(JSONStore(str(data_dir))).save_entry(
        HabitEntry(date=today, habits={MEDITATION: HabitState(True, False)})
    )
    assert _run(data_dir, "frequency", "--period", "month") == 0
    assert "Meditation (habit)" in capsys.readouterr().out
