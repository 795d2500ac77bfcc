# models.py
import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Union

BOOLEAN = "boolean"
NUMERIC = "numeric"


# -------- Day entries --------
@dataclass(frozen=True)
class HabitState:
    done: bool = False
    joy: bool = False

    def to_dict(self) -> dict:
        return {"done": self.done, "joy": self.joy}


def sanitize_habit_state(partial) -> HabitState:
    """Joy implies done. Anything but a literal True counts as False."""
    if isinstance(partial, HabitState):
        partial = partial.to_dict()
    if not isinstance(partial, dict):
        partial = {}
    joy = partial.get("joy") is True
    done = joy or partial.get("done") is True
    return HabitState(done=done, joy=joy)


def toggle_done(state: HabitState, joy_by_default: bool) -> HabitState:
    # turning off always clears joy; turning on follows the habit's default
    if state.done:
        return HabitState(done=False, joy=False)
    return HabitState(done=True, joy=joy_by_default)


def toggle_joy(state: HabitState) -> HabitState:
    return HabitState(done=True, joy=not state.joy)


def commit_habit_states(states: Dict[str, object]) -> Dict[str, HabitState]:
    """Normalize edited form state right before it is saved."""
    return {hid: sanitize_habit_state(s) for hid, s in states.items()}


def _text(raw: dict, key: str) -> str:
    value = raw.get(key)
    return value if isinstance(value, str) else ""


@dataclass
class HabitEntry:
    date: str  # YYYY-MM-DD, primary key
    habits: Dict[str, HabitState] = field(default_factory=dict)
    numeric: Dict[str, float] = field(default_factory=dict)
    moments: List[str] = field(default_factory=list)
    reflection: str = ""
    last_edited: Optional[str] = None

    def habit(self, habit_id: str) -> HabitState:
        return self.habits.get(habit_id, HabitState())

    def value(self, habit_id: str) -> float:
        return self.numeric.get(habit_id, 0)

    def to_dict(self) -> dict:
        data = {
            "date": self.date,
            "habits": {hid: s.to_dict() for hid, s in self.habits.items()},
            "numeric": dict(self.numeric),
            "moments": list(self.moments),
            "reflection": self.reflection,
        }
        if self.last_edited is not None:
            data["lastEdited"] = self.last_edited
        return data

    @classmethod
    def from_dict(cls, raw: dict) -> "HabitEntry":
        """Lenient decode of stored data; every habit state is sanitized."""
        habits = raw.get("habits")
        numeric = raw.get("numeric")
        moments = raw.get("moments")
        last_edited = raw.get("lastEdited")
        return cls(
            date=_text(raw, "date"),
            habits={
                str(hid): sanitize_habit_state(s)
                for hid, s in (habits.items() if isinstance(habits, dict) else [])
            },
            numeric={
                str(hid): v
                for hid, v in (numeric.items() if isinstance(numeric, dict) else [])
                if is_number(v)
            },
            moments=[m for m in moments if isinstance(m, str)] if isinstance(moments, list) else [],
            reflection=raw.get("reflection") if isinstance(raw.get("reflection"), str) else "",
            last_edited=last_edited if isinstance(last_edited, str) else None,
        )


def create_empty_entry(date: str) -> HabitEntry:
    return HabitEntry(date=date)


def is_number(value) -> bool:
    """Finite JSON number; bools and NaN/Infinity do not count."""
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and math.isfinite(value))


# -------- Catalog --------
@dataclass(frozen=True)
class BooleanHabitConfig:
    id: str
    label: str
    joy_by_default: bool = False
    archived: bool = False
    type: str = field(default=BOOLEAN, init=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "type": BOOLEAN,
            "joyByDefault": self.joy_by_default,
            "archived": self.archived,
        }


@dataclass(frozen=True)
class NumericHabitConfig:
    id: str
    label: str
    unit: str = ""
    step: float = 1
    archived: bool = False
    type: str = field(default=NUMERIC, init=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "type": NUMERIC,
            "unit": self.unit,
            "step": self.step,
            "archived": self.archived,
        }


HabitConfig = Union[BooleanHabitConfig, NumericHabitConfig]


@dataclass(frozen=True)
class MomentConfig:
    id: str
    label: str
    archived: bool = False

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "archived": self.archived}


def habit_config_from_dict(raw: dict) -> HabitConfig:
    """Decode one catalog habit, dispatching on its "type" tag."""
    if raw.get("type") == NUMERIC:
        step = raw.get("step", 1)
        return NumericHabitConfig(
            id=_text(raw, "id"),
            label=_text(raw, "label"),
            unit=_text(raw, "unit"),
            step=step if is_number(step) else 1,
            archived=raw.get("archived") is True,
        )
    return BooleanHabitConfig(
        id=_text(raw, "id"),
        label=_text(raw, "label"),
        joy_by_default=raw.get("joyByDefault") is True,
        archived=raw.get("archived") is True,
    )


def moment_config_from_dict(raw: dict) -> MomentConfig:
    return MomentConfig(
        id=_text(raw, "id"),
        label=_text(raw, "label"),
        archived=raw.get("archived") is True,
    )


@dataclass(frozen=True)
class AppConfigs:
    habits: List[HabitConfig] = field(default_factory=list)
    moments: List[MomentConfig] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "habits": [h.to_dict() for h in self.habits],
            "moments": [m.to_dict() for m in self.moments],
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "AppConfigs":
        # non-object list items carry nothing we can resolve; they are left out
        return cls(
            habits=[habit_config_from_dict(h) for h in raw.get("habits", []) if isinstance(h, dict)],
            moments=[moment_config_from_dict(m) for m in raw.get("moments", []) if isinstance(m, dict)],
        )

    def with_habits(self, habits: List[HabitConfig]) -> "AppConfigs":
        return replace(self, habits=list(habits))

    def with_moments(self, moments: List[MomentConfig]) -> "AppConfigs":
        return replace(self, moments=list(moments))


# -------- Label lookup --------
def habit_label(configs: AppConfigs, habit_id: str) -> str:
    """Unknown ids fall back to the raw id."""
    for h in configs.habits:
        if h.id == habit_id:
            return h.label
    return habit_id


def moment_label(configs: AppConfigs, moment_id: str) -> str:
    for m in configs.moments:
        if m.id == moment_id:
            return m.label
    return moment_id
