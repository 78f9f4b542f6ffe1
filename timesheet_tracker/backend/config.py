from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from loguru import logger

from .storage import STORAGE_KEY, JsonFileBackend

DEFAULT_STORAGE_PATH = os.path.join("~", ".timesheet_tracker", "schedule.json")
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_MODEL = "gpt-4o-mini"


@dataclass
class TrackerConfig:
    storage_path: str = DEFAULT_STORAGE_PATH
    storage_key: str = STORAGE_KEY
    log_level: str = DEFAULT_LOG_LEVEL
    model: str = DEFAULT_MODEL

    def backend(self) -> JsonFileBackend:
        return JsonFileBackend(os.path.expanduser(self.storage_path))


def load_from_env(environ: dict[str, str] | None = None) -> TrackerConfig:
    """Build a config from TIMESHEET_* variables, falling back to defaults."""
    env = os.environ if environ is None else environ
    return TrackerConfig(
        storage_path=(env.get("TIMESHEET_STORAGE_PATH") or DEFAULT_STORAGE_PATH).strip(),
        storage_key=(env.get("TIMESHEET_STORAGE_KEY") or STORAGE_KEY).strip(),
        log_level=(env.get("TIMESHEET_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper(),
        model=(env.get("OPENAI_MODEL") or DEFAULT_MODEL).strip(),
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Send loguru output to stderr at ``level``; unknown levels fall back to the default."""
    logger.remove()
    try:
        logger.add(sys.stderr, level=level)
    except ValueError:
        logger.add(sys.stderr, level=DEFAULT_LOG_LEVEL)
        logger.warning("Unknown log level {!r}, using {}", level, DEFAULT_LOG_LEVEL)
