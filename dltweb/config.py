from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class FlaskSettings:
    secret_key: str = "dltsync-dev-secret"
    debug: bool = True


@dataclass(frozen=True)
class AppSettings:
    flask: FlaskSettings
    database_url: str
    sync_on_startup: bool = True
    history_key: str = "dlt_history"


@lru_cache(maxsize=1)
def load_settings(dotenv_path: Optional[str] = None) -> AppSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        load_dotenv()

    flask_settings = FlaskSettings(
        secret_key=os.getenv("FLASK_SECRET_KEY", "dltsync-dev-secret"),
        debug=os.getenv("FLASK_DEBUG", "1") == "1",
    )

    return AppSettings(
        flask=flask_settings,
        database_url=os.getenv("DATABASE_URL", "sqlite:///dltsync.db"),
        sync_on_startup=os.getenv("SYNC_ON_STARTUP", "1") == "1",
        history_key=os.getenv("HISTORY_KEY", "dlt_history"),
    )
