from .base import RecordSource
from .live_scraper import LadderStep, LiveScraperSource, build_ladder, parse_report
from .static_file import StaticFileSource

__all__ = [
    "RecordSource",
    "LadderStep",
    "LiveScraperSource",
    "StaticFileSource",
    "build_ladder",
    "parse_report",
]
