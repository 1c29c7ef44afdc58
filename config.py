"""Centralized configuration for environment variables."""

import logging
import os
from pathlib import Path

PITCH_HISTORY_PATH_ENV = "PITCH_HISTORY_PATH"
PORT_ENV = "PORT"
LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_PORT = 5050
DEFAULT_LOG_LEVEL = "INFO"

# Extra-inning games are capped at 12 innings by league rules.
MAX_INNINGS = 12


def get_history_path() -> Path | None:
    """Return the pitching history file path, or None to keep history in memory."""
    value = os.environ.get(PITCH_HISTORY_PATH_ENV, "").strip()
    return Path(value) if value else None


def get_port() -> int:
    """Return the HTTP port for the API server."""
    value = os.environ.get(PORT_ENV, "")
    try:
        return int(value) if value else DEFAULT_PORT
    except ValueError:
        return DEFAULT_PORT


def get_log_level() -> int:
    """Return the configured logging level, falling back to INFO for unknown names."""
    name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
