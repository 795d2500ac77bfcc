# frequency.py
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from models import AppConfigs, HabitEntry

PERIODS = ("month", "3m", "always")


@dataclass(frozen=True)
class FrequencyItem:
    id: str
    label: str
    type: str  # "habit" or "moment"
    count: int


def _three_months_start(today: date) -> str:
    year, month = today.year, today.month - 2
    if month < 1:
        year, month = year - 1, month + 12
    return f"{year:04d}-{month:02d}-01"


def entries_in_period(entries: List[HabitEntry], period: str, viewed_year: int,
                      viewed_month: int, today: Optional[date] = None) -> List[HabitEntry]:
    """viewed_month is 1-based. "3m" is always relative to today."""
    if period == "always":
        return list(entries)
    if period == "month":
        prefix = f"{viewed_year:04d}-{viewed_month:02d}"
        return [e for e in entries if e.date.startswith(prefix)]
    if period == "3m":
        start = _three_months_start(today or date.today())
        return [e for e in entries if e.date >= start]
    raise ValueError(f"Unknown period '{period}'. Expected one of {', '.join(PERIODS)}.")


def frequency_counts(entries: List[HabitEntry], configs: AppConfigs, period: str = "always",
                     viewed_year: int = 0, viewed_month: int = 0,
                     today: Optional[date] = None) -> List[FrequencyItem]:
    """Days each catalog habit/moment was logged, most frequent first."""
    counts = Counter()
    for entry in entries_in_period(entries, period, viewed_year, viewed_month, today):
        for hid, state in entry.habits.items():
            if state.done:
                counts[hid] += 1
        for hid, value in entry.numeric.items():
            if value > 0:
                counts[hid] += 1
        for mid in entry.moments:
            counts[mid] += 1

    habit_labels = {h.id: h.label for h in configs.habits}
    moment_labels = {m.id: m.label for m in configs.moments}

    items = []
    for item_id, count in counts.items():
        if item_id in habit_labels:
            items.append(FrequencyItem(item_id, habit_labels[item_id], "habit", count))
        elif item_id in moment_labels:
            items.append(FrequencyItem(item_id, moment_labels[item_id], "moment", count))
    items.sort(key=lambda i: i.count, reverse=True)
    return items
