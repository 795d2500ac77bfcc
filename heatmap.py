"""Calendar heatmap colors.

A day carries two signals: how many boolean habits were done (the habit
axis, dusk blue) and how much joy it held (joy-flagged habits plus
moments, the joy axis, warm ember). Each axis drives lightness on its own
hue; when both are present hue, saturation and lightness are averaged,
weighted by each axis's magnitude.
"""

import calendar
import colorsys
import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from models import HabitEntry

BOOLEAN_HABIT = "boolean-habit"
NUMERIC_HABIT = "numeric-habit"
MOMENT = "moment"
FILTER_KINDS = (BOOLEAN_HABIT, NUMERIC_HABIT, MOMENT)

JOY_SATURATION_COUNT = 6  # joy signals beyond this add nothing
DIMMED_OPACITY = 0.35


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


@dataclass(frozen=True)
class HslColor:
    h: int
    s: int
    l: int

    def css(self) -> str:
        return f"hsl({self.h}, {self.s}%, {self.l}%)"

    def rgb(self):
        r, g, b = colorsys.hls_to_rgb(self.h / 360, self.l / 100, self.s / 100)
        return round_half_up(r * 255), round_half_up(g * 255), round_half_up(b * 255)

    def to_hex(self) -> str:
        return "#%02x%02x%02x" % self.rgb()


@dataclass(frozen=True)
class Axis:
    hue: int
    saturation: int
    light_range: tuple  # (lightness at 0, lightness at 1) on a light background
    dark_range: tuple

    def lightness(self, intensity: float, is_dark: bool) -> float:
        start, end = self.dark_range if is_dark else self.light_range
        return start + (end - start) * intensity

    def color(self, intensity: float, is_dark: bool) -> HslColor:
        return HslColor(self.hue, self.saturation, round_half_up(self.lightness(intensity, is_dark)))


HABIT_AXIS = Axis(hue=210, saturation=45, light_range=(88, 44), dark_range=(28, 66))
JOY_AXIS = Axis(hue=23, saturation=70, light_range=(86, 50), dark_range=(30, 62))

# full-intensity reference colors
HABIT_REFERENCE_LIGHT = "#3e70a3"
HABIT_REFERENCE_DARK = "#81a8cf"
JOY_REFERENCE_LIGHT = "#d96b26"
JOY_REFERENCE_DARK = "#e28e5a"

MUTED_LIGHT = HslColor(25, 6, 80)
MUTED_DARK = HslColor(25, 6, 35)


def muted(is_dark: bool) -> HslColor:
    return MUTED_DARK if is_dark else MUTED_LIGHT


@dataclass(frozen=True)
class HeatmapFilter:
    kind: str
    id: str

    def __post_init__(self):
        if self.kind not in FILTER_KINDS:
            raise ValueError(f"Unknown filter kind '{self.kind}'")


def matches_filter(entry: HabitEntry, flt: HeatmapFilter) -> bool:
    if flt.kind == BOOLEAN_HABIT:
        return entry.habit(flt.id).done
    if flt.kind == NUMERIC_HABIT:
        return entry.value(flt.id) > 0
    return flt.id in entry.moments


def intensities(entry: HabitEntry, active_boolean_habit_count: int):
    """(habit axis, joy axis) intensities, both in [0, 1]."""
    habit_count = sum(1 for s in entry.habits.values() if s.done)
    joy_count = sum(1 for s in entry.habits.values() if s.joy) + len(entry.moments)
    # done habits that were archived since can push the ratio past 1
    b = min(habit_count / max(active_boolean_habit_count, 1), 1)
    y = min(joy_count / JOY_SATURATION_COUNT, 1)
    return b, y


def color_for(entry: Optional[HabitEntry], is_dark: bool, active_boolean_habit_count: int,
              flt: Optional[HeatmapFilter] = None) -> Optional[HslColor]:
    """Color of a day cell, or None when there is no entry."""
    if entry is None:
        return None

    if flt is not None:
        if not matches_filter(entry, flt):
            return muted(is_dark)
        axis = JOY_AXIS if flt.kind == MOMENT else HABIT_AXIS
        return axis.color(1, is_dark)

    b, y = intensities(entry, active_boolean_habit_count)
    if b == 0 and y == 0:
        return muted(is_dark)
    if y == 0:
        return HABIT_AXIS.color(b, is_dark)
    if b == 0:
        return JOY_AXIS.color(y, is_dark)

    total = b + y
    habit_l = HABIT_AXIS.lightness(b, is_dark)
    joy_l = JOY_AXIS.lightness(y, is_dark)
    return HslColor(
        round_half_up((HABIT_AXIS.hue * b + JOY_AXIS.hue * y) / total),
        round_half_up((HABIT_AXIS.saturation * b + JOY_AXIS.saturation * y) / total),
        round_half_up((habit_l * b + joy_l * y) / total),
    )


# ---------- Calendar cells ----------
@dataclass(frozen=True)
class CellStyle:
    color: Optional[HslColor]
    opacity: float
    clickable: bool


def today_string() -> str:
    return date.today().isoformat()


def cell_style(day: str, entry: Optional[HabitEntry], today: str, is_dark: bool,
               active_boolean_habit_count: int, flt: Optional[HeatmapFilter] = None) -> CellStyle:
    # future days stay blank even if something is stored for them
    if day > today:
        return CellStyle(color=None, opacity=0.25, clickable=False)
    color = color_for(entry, is_dark, active_boolean_habit_count, flt)
    opacity = 1.0
    if flt is not None and entry is not None and not matches_filter(entry, flt):
        opacity = DIMMED_OPACITY
    return CellStyle(color=color, opacity=opacity, clickable=True)


def month_grid(year: int, month: int) -> List[List[Optional[str]]]:
    """Monday-first weeks of ISO date strings, padded with None."""
    weeks = []
    for week in calendar.Calendar(firstweekday=0).monthdayscalendar(year, month):
        weeks.append([date(year, month, d).isoformat() if d else None for d in week])
    return weeks
