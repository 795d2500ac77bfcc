import pytest

from config_store import ConfigStore
from entry_store import EntryStore
from models import HabitEntry, HabitState
from repo_json import JSONStore

MEDITATION = "00000000-0000-4000-8000-000000000001"
EXERCISE = "00000000-0000-4000-8000-000000000002"
READING = "00000000-0000-4000-8000-000000000003"
SLEEP = "00000000-0000-4000-8000-000000000006"
GOOD_MEAL = "00000000-0000-4000-8000-000000000011"
NATURE = "00000000-0000-4000-8000-000000000014"


@pytest.fixture
def store(tmp_path):
    return JSONStore(str(tmp_path / "data"))


@pytest.fixture
def unavailable_store(tmp_path):
    """A store whose directory path is occupied by a plain file."""
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory", encoding="utf-8")
    return JSONStore(str(blocker))


@pytest.fixture
def entry_store(store):
    return EntryStore(store)


@pytest.fixture
def config_store(store):
    return ConfigStore(store)


@pytest.fixture
def make_entry():
    def _make(date="2026-02-25", **overrides):
        fields = {
            "habits": {
                MEDITATION: HabitState(done=True, joy=True),
                EXERCISE: HabitState(done=True, joy=False),
            },
            "numeric": {SLEEP: 7.5},
            "moments": [GOOD_MEAL],
            "reflection": "Good day overall.",
        }
        fields.update(overrides)
        return HabitEntry(date=date, **fields)

    return _make
