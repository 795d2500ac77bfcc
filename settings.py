"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass

ENTRIES_KEY = "clarity_entries"
CONFIGS_KEY = "clarity-configs"
THEME_KEY = "clarity-theme"
BACKUP_FILENAME = "habits-backup.json"


@dataclass(frozen=True)
class Settings:
    data_dir: str = "data"
    heatmap_port: int = 5566
    timeout_ms: int = 1500
    log_file: str = "logs/clarity.log"
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"Invalid {name} '{raw}', using default {default} instead.")
        return default


def load_settings() -> Settings:
    return Settings(
        data_dir=os.getenv("CLARITY_DATA_DIR", "data"),
        heatmap_port=_int_env("CLARITY_HEATMAP_PORT", 5566),
        timeout_ms=_int_env("CLARITY_SERVICE_TIMEOUT_MS", 1500),
        log_file=os.getenv("CLARITY_LOG_FILE", "logs/clarity.log"),
        log_level=os.getenv("CLARITY_LOG_LEVEL", "INFO").upper(),
    )
