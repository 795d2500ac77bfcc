from datetime import date

import pytest

from config_store import default_configs
from frequency import entries_in_period, frequency_counts
from models import HabitEntry, HabitState

from conftest import EXERCISE, GOOD_MEAL, MEDITATION, SLEEP


def _entry(day, **fields):
    return HabitEntry(date=day, **fields)


ENTRIES = [
    _entry("2026-07-30", habits={MEDITATION: HabitState(True, False)}),
    _entry("2026-08-02", habits={MEDITATION: HabitState(True, True), EXERCISE: HabitState()}),
    _entry("2026-10-03", numeric={SLEEP: 7, "retired-habit": 2}, moments=[GOOD_MEAL, "unknown"]),
    _entry("2026-10-04", habits={MEDITATION: HabitState(True, False)}, numeric={SLEEP: 0}),
]


def test_always_counts_every_day():
    items = frequency_counts(ENTRIES, default_configs(), "always")
    counts = {i.label: i.count for i in items}
    assert counts == {"Meditation": 3, "Sleep": 1, "Good meal": 1}
    assert items[0].label == "Meditation"
    assert next(i for i in items if i.id == GOOD_MEAL).type == "moment"


def test_month_period_uses_viewed_month():
    items = frequency_counts(ENTRIES, default_configs(), "month", 2026, 8)
    assert [(i.label, i.count) for i in items] == [("Meditation", 1)]


def test_three_months_is_relative_to_today():
    kept = entries_in_period(ENTRIES, "3m", 0, 0, today=date(2026, 10, 19))
    assert [e.date for e in kept] == ["2026-08-02", "2026-10-03", "2026-10-04"]


def test_three_months_wraps_the_year():
    entries = [_entry("2025-11-30"), _entry("2025-12-01")]
    kept = entries_in_period(entries, "3m", 0, 0, today=date(2026, 2, 10))
    assert [e.date for e in kept] == ["2025-12-01"]


def test_unknown_period_rejected():
    with pytest.raises(ValueError):
        entries_in_period(ENTRIES, "week", 0, 0)


def test_nothing_logged_is_empty():
    assert frequency_counts([], default_configs(), "always") == []
