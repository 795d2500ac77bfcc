import json

import pytest

from heatmap import HABIT_REFERENCE_LIGHT, MUTED_LIGHT
from microservices.heatmap_service import handle_message
from models import HabitEntry, HabitState

from conftest import EXERCISE, GOOD_MEAL, MEDITATION

ALL_DEFAULT_BOOLEANS = [MEDITATION, EXERCISE, "00000000-0000-4000-8000-000000000003",
                        "00000000-0000-4000-8000-000000000004"]


def _call(payload, entry_store, config_store):
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
    return json.loads(handle_message(raw, entry_store, config_store).decode("utf-8"))


@pytest.fixture
def seeded(entry_store, config_store):
    entry_store.save_entry(HabitEntry(
        date="2026-02-10",
        habits={hid: HabitState(True, False) for hid in ALL_DEFAULT_BOOLEANS},
    ))
    entry_store.save_entry(HabitEntry(date="2026-02-11"))
    entry_store.save_entry(HabitEntry(date="2026-02-20", moments=[GOOD_MEAL]))
    return entry_store, config_store


def test_heatmap_month_cells(seeded):
    response = _call({"request_type": "heatmap_month", "year": 2026, "month": 2, "today": "2026-02-15"}, *seeded)
    assert response["status"] == "ok"
    cells = {c["date"]: c for c in response["cells"]}
    assert len(cells) == 28
    assert cells["2026-02-10"]["hex"] == HABIT_REFERENCE_LIGHT
    assert cells["2026-02-11"]["color"] == MUTED_LIGHT.css()
    assert cells["2026-02-12"]["color"] is None and cells["2026-02-12"]["clickable"]
    assert cells["2026-02-20"]["color"] is None and not cells["2026-02-20"]["clickable"]


def test_heatmap_month_filter(seeded):
    response = _call({
        "request_type": "heatmap_month", "year": 2026, "month": 2, "today": "2026-02-28",
        "filter": {"kind": "moment", "id": GOOD_MEAL},
    }, *seeded)
    cells = {c["date"]: c for c in response["cells"]}
    assert cells["2026-02-20"]["opacity"] == 1.0
    assert cells["2026-02-10"]["opacity"] < 1.0


@pytest.mark.parametrize("payload, message", [
    (b"not json", "Invalid JSON"),
    ({"request_type": "streaks"}, "Unsupported request_type"),
    ({"request_type": "heatmap_month", "year": 2026, "month": 13}, "'month' (1-12)"),
    ({"request_type": "heatmap_month", "year": 0, "month": 1}, "'year' (1-9999)"),
    ({"request_type": "heatmap_month", "year": True, "month": 1}, "'year' (1-9999)"),
    ({"request_type": "heatmap_month", "year": 2026, "month": 2, "today": 5}, "'today'"),
    ({"request_type": "heatmap_month", "year": 2026, "month": 2, "today": "2026-2-5"}, "'today'"),
    ({"request_type": "frequency", "period": "month", "year": 10000, "month": 2}, "'year' (1-9999)"),
    ({"request_type": "heatmap_month", "year": 2026, "month": 2, "filter": {"kind": "tag", "id": "x"}}, "'filter'"),
    ({"request_type": "frequency", "period": "week"}, "Invalid 'period'"),
])
def test_errors_are_responses(entry_store, config_store, payload, message):
    response = _call(payload, entry_store, config_store)
    assert response["status"] == "error"
    assert message in response["error"]


def test_frequency_request(seeded):
    response = _call({"request_type": "frequency", "period": "month", "year": 2026, "month": 2}, *seeded)
    assert response["status"] == "ok"
    counts = {i["label"]: i["count"] for i in response["items"]}
    assert counts["Meditation"] == 1
    assert counts["Good meal"] == 1
