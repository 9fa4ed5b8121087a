from __future__ import annotations

import asyncio
import logging
import pathlib
from typing import List, Optional

from ..codec import decode
from ..types import DrawRecord
from .base import RecordSource


class StaticFileSource(RecordSource):
    """Read the bundled CSV dataset; any read error yields no records."""

    name = "static"

    def __init__(self, path: str, logger: Optional[logging.Logger] = None) -> None:
        self._path = pathlib.Path(path)
        self._logger = logger or logging.getLogger("dltsync.datasource.static")

    async def fetch_records(self) -> List[DrawRecord]:
        try:
            text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self._logger.warning("Static dataset %s unreadable, using no records: %s", self._path, exc)
            return []
        records = decode(text)
        self._logger.info("Loaded %s records from %s", len(records), self._path)
        return records
