"""Environment-driven settings."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

LOG_LEVEL_ENV = "POGO_GAMEMASTER_LOG_LEVEL"
GAMEMASTER_FILE_ENV = "POGO_GAMEMASTER_FILE"

DEFAULT_LOG_LEVEL = "INFO"

# PvPoke publishes the layout the catalog parser expects.
GAMEMASTER_URL = "https://raw.githubusercontent.com/pvpoke/pvpoke/master/src/data/gamemaster.json"


def log_level() -> str:
    """Return the configured log level name, upper-cased."""

    return os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL


def gamemaster_path() -> Optional[Path]:
    """Return the gamemaster file configured via ``POGO_GAMEMASTER_FILE``, if any."""

    value = os.environ.get(GAMEMASTER_FILE_ENV, "").strip()
    if not value:
        return None
    return Path(value).expanduser()
