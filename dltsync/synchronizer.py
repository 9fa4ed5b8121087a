from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .datasource import RecordSource
from .reconciler import Reconciler


@dataclass
class SyncResult:
    fetched: int
    added: int
    total: int


class HistorySynchronizer:
    """Single-flight live synchronization into a :class:`Reconciler`.

    A sync requested while another is outstanding is a no-op returning None.
    """

    def __init__(
        self,
        reconciler: Reconciler,
        source: RecordSource,
        poll_interval_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._reconciler = reconciler
        self._source = source
        self._poll_interval = poll_interval_seconds
        self._guard = threading.Lock()
        self._logger = logger or logging.getLogger("dltsync.synchronizer")

    @property
    def is_syncing(self) -> bool:
        return self._guard.locked()

    async def sync_once(self) -> Optional[SyncResult]:
        """Fetch from the live source and merge.

        Raises whatever the source raises (e.g. ``SyncExhaustedError``);
        the history is left untouched in that case.
        """
        if not self._guard.acquire(blocking=False):
            self._logger.info("Sync already in progress; skipping.")
            return None
        try:
            records = await self._source.fetch_records()
            before = len(self._reconciler.history)
            merged = self._reconciler.apply(records)
            return SyncResult(fetched=len(records), added=len(merged) - before, total=len(merged))
        finally:
            self._guard.release()

    async def trigger(self) -> Optional[SyncResult]:
        """Background variant of :meth:`sync_once` that logs failures."""
        try:
            return await self.sync_once()
        except Exception as exc:
            self._logger.exception("Sync failed; keeping existing history: %s", exc)
            return None

    async def run_forever(self) -> None:
        interval = self._poll_interval
        self._logger.info("Sync loop started; poll interval=%s", interval)
        try:
            while True:
                result = await self.trigger()
                if result:
                    self._logger.info(
                        "Sync merged %s fetched records (%s new, %s total)",
                        result.fetched,
                        result.added,
                        result.total,
                    )
                await asyncio.sleep(interval)
        finally:
            await self._source.close()
