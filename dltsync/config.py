from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from dotenv import load_dotenv

BUNDLED_DATASET = str(pathlib.Path(__file__).resolve().parent / "data" / "history.csv")

DEFAULT_REPORT_URL = "https://datachart.500.com/dlt/history/newinc/history.php?limit={limit}&sort=0"
DEFAULT_RELAYS: Tuple[str, ...] = (
    "https://api.allorigins.win/raw?url=",
    "https://corsproxy.io/?",
    "https://thingproxy.freeboard.io/fetch/",
)
DEFAULT_LIMITS: Tuple[int, ...] = (2000, 1000, 500, 100)


def _int_from_env(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


def _list_from_env(value: Optional[str], default: Sequence[str]) -> Tuple[str, ...]:
    if value is None or value.strip() == "":
        return tuple(default)
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _int_list_from_env(value: Optional[str], default: Sequence[int]) -> Tuple[int, ...]:
    return tuple(int(item) for item in _list_from_env(value, [str(n) for n in default]))


@dataclass(frozen=True)
class ScraperSettings:
    report_url: str = DEFAULT_REPORT_URL
    relays: Tuple[str, ...] = DEFAULT_RELAYS
    limits: Tuple[int, ...] = DEFAULT_LIMITS
    timeout_seconds: int = 20
    min_records: int = 5
    row_marker: str = "tr.t_tr1"
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


@dataclass(frozen=True)
class TrendSettings:
    window: int = 30
    default_sum: int = 90
    spread: int = 5


@dataclass(frozen=True)
class EngineSettings:
    dataset_path: str = BUNDLED_DATASET
    history_file: str = "dlt_history.csv"
    poll_interval_seconds: int = 3600
    scraper: ScraperSettings = field(default_factory=ScraperSettings)
    trend: TrendSettings = field(default_factory=TrendSettings)

    def copy(self, **updates) -> "EngineSettings":
        return replace(self, **updates)


def load_from_environment() -> EngineSettings:
    scraper = ScraperSettings(
        report_url=os.getenv("SCRAPER__REPORT_URL", DEFAULT_REPORT_URL),
        relays=_list_from_env(os.getenv("SCRAPER__RELAYS"), DEFAULT_RELAYS),
        limits=_int_list_from_env(os.getenv("SCRAPER__LIMITS"), DEFAULT_LIMITS),
        timeout_seconds=_int_from_env(os.getenv("SCRAPER__TIMEOUT_SECONDS"), 20),
        min_records=_int_from_env(os.getenv("SCRAPER__MIN_RECORDS"), 5),
    )

    trend = TrendSettings(
        window=_int_from_env(os.getenv("TREND__WINDOW"), 30),
        default_sum=_int_from_env(os.getenv("TREND__DEFAULT_SUM"), 90),
        spread=_int_from_env(os.getenv("TREND__SPREAD"), 5),
    )

    return EngineSettings(
        dataset_path=os.getenv("DATASET_PATH", BUNDLED_DATASET),
        history_file=os.getenv("HISTORY_FILE", "dlt_history.csv"),
        poll_interval_seconds=_int_from_env(os.getenv("POLL_INTERVAL_SECONDS"), 3600),
        scraper=scraper,
        trend=trend,
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> EngineSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
