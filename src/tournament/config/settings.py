"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


_DB_PATH_ENV = "TOURNAMENT_DB_PATH"
_LOG_LEVEL_ENV = "TOURNAMENT_LOG_LEVEL"

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "tournament.sqlite"


@dataclass(frozen=True)
class Settings:
    db_path: Path
    log_level: str = "INFO"


def load_settings(db_path: Path | str | None = None) -> Settings:
    """Build settings, preferring an explicit path over ``TOURNAMENT_DB_PATH``."""

    if db_path is None:
        env_db = os.getenv(_DB_PATH_ENV)
        db_path = Path(env_db) if env_db else DEFAULT_DB_PATH
    log_level = (os.getenv(_LOG_LEVEL_ENV) or "INFO").upper()
    return Settings(db_path=Path(db_path), log_level=log_level)
