# config_store.py
import logging
import uuid
from dataclasses import replace
from typing import List

from errors import MalformedStoredData, StoreUnavailable
from models import (
    AppConfigs,
    BooleanHabitConfig,
    HabitConfig,
    MomentConfig,
    NumericHabitConfig,
)
from repo_json import JSONStore
from settings import CONFIGS_KEY, THEME_KEY

logger = logging.getLogger(__name__)

LIGHT = "light"
DARK = "dark"

# Fixed ids keep references in old entries resolvable across resets.
DEFAULT_HABIT_CONFIGS: List[HabitConfig] = [
    BooleanHabitConfig("00000000-0000-4000-8000-000000000001", "Meditation", joy_by_default=True),
    BooleanHabitConfig("00000000-0000-4000-8000-000000000002", "Exercise"),
    BooleanHabitConfig("00000000-0000-4000-8000-000000000003", "Reading", joy_by_default=True),
    BooleanHabitConfig("00000000-0000-4000-8000-000000000004", "Journaling"),
    NumericHabitConfig("00000000-0000-4000-8000-000000000006", "Sleep", unit="hrs", step=0.5),
    NumericHabitConfig("00000000-0000-4000-8000-000000000007", "Water", unit="glasses", step=1),
    NumericHabitConfig("00000000-0000-4000-8000-000000000008", "Screen time", unit="hrs", step=0.5),
    NumericHabitConfig("00000000-0000-4000-8000-000000000009", "Coffee", unit="cups", step=1),
]

DEFAULT_MOMENT_CONFIGS: List[MomentConfig] = [
    MomentConfig("00000000-0000-4000-8000-000000000011", "Good meal"),
    MomentConfig("00000000-0000-4000-8000-000000000012", "Interesting conversation"),
    MomentConfig("00000000-0000-4000-8000-000000000013", "Inspiring song"),
    MomentConfig("00000000-0000-4000-8000-000000000014", "Time in nature"),
]


def default_configs() -> AppConfigs:
    return AppConfigs(habits=list(DEFAULT_HABIT_CONFIGS), moments=list(DEFAULT_MOMENT_CONFIGS))


class ConfigStore:
    """The single authoritative habit/moment catalog."""

    def __init__(self, store: JSONStore):
        self.store = store

    def get_configs(self) -> AppConfigs:
        """Saved configs, or the defaults when nothing usable is stored."""
        if not self.store.is_available():
            return default_configs()
        try:
            raw = self.store.read_json(CONFIGS_KEY)
        except (StoreUnavailable, MalformedStoredData) as exc:
            logger.warning("Stored configs unreadable, using defaults: %s", exc)
            return default_configs()
        if raw is None:
            return default_configs()
        if (
            not isinstance(raw, dict)
            or not isinstance(raw.get("habits"), list)
            or not isinstance(raw.get("moments"), list)
        ):
            logger.warning("Stored configs are malformed, using defaults.")
            return default_configs()
        return AppConfigs.from_dict(raw)

    def save_configs(self, configs: AppConfigs) -> None:
        """Replaces the whole catalog."""
        if not self.store.is_available():
            logger.error("Config store is unavailable; configs not saved.")
            return
        try:
            self.store.write_json(CONFIGS_KEY, configs.to_dict())
        except StoreUnavailable as exc:
            logger.error("Configs not saved: %s", exc)

    # -------- Theme preference --------
    def get_theme(self) -> str:
        try:
            return DARK if self.store.get_item(THEME_KEY) == DARK else LIGHT
        except StoreUnavailable:
            return LIGHT

    def set_theme(self, theme: str) -> None:
        if theme not in (LIGHT, DARK):
            raise ValueError(f"Unknown theme '{theme}'")
        try:
            self.store.set_item(THEME_KEY, theme)
        except StoreUnavailable as exc:
            logger.error("Theme not saved: %s", exc)


# ---------- Catalog views ----------
def active_habits(configs: AppConfigs) -> List[HabitConfig]:
    return [h for h in configs.habits if not h.archived]


def archived_habits(configs: AppConfigs) -> List[HabitConfig]:
    return [h for h in configs.habits if h.archived]


def active_moments(configs: AppConfigs) -> List[MomentConfig]:
    return [m for m in configs.moments if not m.archived]


def archived_moments(configs: AppConfigs) -> List[MomentConfig]:
    return [m for m in configs.moments if m.archived]


def active_boolean_habit_count(configs: AppConfigs) -> int:
    return sum(1 for h in active_habits(configs) if isinstance(h, BooleanHabitConfig))


# ---------- Catalog edits (return a new AppConfigs; caller saves it) ----------
def _clean_label(label: str) -> str:
    label = (label or "").strip()
    if not label:
        raise ValueError("Label must not be empty.")
    return label


def _check_step(step) -> None:
    if isinstance(step, bool) or not isinstance(step, (int, float)) or step <= 0:
        raise ValueError("Step must be a positive number.")


def new_id() -> str:
    return str(uuid.uuid4())


def add_boolean_habit(configs: AppConfigs, label: str, joy_by_default: bool = False) -> AppConfigs:
    habit = BooleanHabitConfig(new_id(), _clean_label(label), joy_by_default=joy_by_default)
    return configs.with_habits(configs.habits + [habit])


def add_numeric_habit(configs: AppConfigs, label: str, unit: str, step=1) -> AppConfigs:
    _check_step(step)
    habit = NumericHabitConfig(new_id(), _clean_label(label), unit=unit.strip(), step=step)
    return configs.with_habits(configs.habits + [habit])


def _update_habit(configs: AppConfigs, habit_id: str, change) -> AppConfigs:
    if not any(h.id == habit_id for h in configs.habits):
        raise KeyError(habit_id)
    return configs.with_habits([change(h) if h.id == habit_id else h for h in configs.habits])


def edit_habit(configs: AppConfigs, habit_id: str, label: str, unit=None, step=None) -> AppConfigs:
    """Relabel a habit; numeric habits may also change unit and step."""
    label = _clean_label(label)

    def change(h):
        if isinstance(h, NumericHabitConfig):
            if step is not None:
                _check_step(step)
            return replace(
                h,
                label=label,
                unit=h.unit if unit is None else unit.strip(),
                step=h.step if step is None else step,
            )
        return replace(h, label=label)

    return _update_habit(configs, habit_id, change)


def toggle_joy_by_default(configs: AppConfigs, habit_id: str) -> AppConfigs:
    return _update_habit(
        configs,
        habit_id,
        lambda h: replace(h, joy_by_default=not h.joy_by_default) if isinstance(h, BooleanHabitConfig) else h,
    )


def archive_habit(configs: AppConfigs, habit_id: str) -> AppConfigs:
    return _update_habit(configs, habit_id, lambda h: replace(h, archived=True))


def restore_habit(configs: AppConfigs, habit_id: str) -> AppConfigs:
    return _update_habit(configs, habit_id, lambda h: replace(h, archived=False))


def add_moment(configs: AppConfigs, label: str) -> AppConfigs:
    return configs.with_moments(configs.moments + [MomentConfig(new_id(), _clean_label(label))])


def _update_moment(configs: AppConfigs, moment_id: str, change) -> AppConfigs:
    if not any(m.id == moment_id for m in configs.moments):
        raise KeyError(moment_id)
    return configs.with_moments([change(m) if m.id == moment_id else m for m in configs.moments])


def edit_moment(configs: AppConfigs, moment_id: str, label: str) -> AppConfigs:
    label = _clean_label(label)
    return _update_moment(configs, moment_id, lambda m: replace(m, label=label))


def archive_moment(configs: AppConfigs, moment_id: str) -> AppConfigs:
    return _update_moment(configs, moment_id, lambda m: replace(m, archived=True))


def restore_moment(configs: AppConfigs, moment_id: str) -> AppConfigs:
    return _update_moment(configs, moment_id, lambda m: replace(m, archived=False))
