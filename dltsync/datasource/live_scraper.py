from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

from ..config import ScraperSettings
from ..errors import SyncExhaustedError
from ..types import DATE_PATTERN, AttemptOutcome, DrawRecord, FetchAttempt
from .base import RecordSource

MIN_ROW_CELLS = 9


@dataclass(frozen=True)
class LadderStep:
    relay: str
    limit: int


def build_ladder(relays: Sequence[str], limits: Sequence[int]) -> List[LadderStep]:
    """Every relay is tried against every limit, relay-major, in declared order."""
    return [LadderStep(relay=relay, limit=limit) for relay in relays for limit in limits]


def parse_report(html: str, row_marker: str = "tr.t_tr1") -> List[DrawRecord]:
    """Extract draw rows from the upstream history report page.

    Cell 0 holds the period id, cells 1-5 the front numbers and cells 6-7 the
    back numbers. The draw date is the last cell shaped like ``YYYY-MM-DD``.
    """
    soup = BeautifulSoup(html, "lxml")
    records: List[DrawRecord] = []
    for row in soup.select(row_marker):
        cells = [cell.get_text(strip=True) for cell in row.find_all("td")]
        if len(cells) < MIN_ROW_CELLS:
            continue
        draw_id = cells[0]
        draw_date = next((value for value in reversed(cells) if DATE_PATTERN.match(value)), "")
        if not draw_id or not draw_date:
            continue
        try:
            front = tuple(int(cells[i]) for i in range(1, 6))
            back = tuple(int(cells[i]) for i in range(6, 8))
        except ValueError:
            continue
        record = DrawRecord(id=draw_id, date=draw_date, front=front, back=back)
        if record.is_valid():
            records.append(record)
    return records


class LiveScraperSource(RecordSource):
    """Scrape the upstream report through an ordered relay x limit ladder.

    The first attempt yielding more than ``min_records`` records wins. When
    every attempt fails, :class:`SyncExhaustedError` carries the last error.
    """

    name = "live"

    def __init__(self, settings: ScraperSettings, logger: Optional[logging.Logger] = None) -> None:
        self._settings = settings
        self._ladder = build_ladder(settings.relays, settings.limits)
        self._logger = logger or logging.getLogger("dltsync.datasource.live")
        self.last_attempts: List[FetchAttempt] = []

    @property
    def ladder(self) -> Sequence[LadderStep]:
        return tuple(self._ladder)

    def relay_url(self, step: LadderStep) -> str:
        target = self._settings.report_url.format(limit=step.limit)
        return f"{step.relay}{quote(target, safe='')}"

    async def fetch_records(self) -> List[DrawRecord]:
        cfg = self._settings
        attempts: List[FetchAttempt] = []
        last_error: Optional[BaseException] = None
        self.last_attempts = attempts

        for step in self._ladder:
            url = self.relay_url(step)
            self._logger.debug("Fetching %s (limit=%s)", step.relay, step.limit)
            try:
                html = await asyncio.to_thread(self._download, url, cfg.timeout_seconds)
            except requests.Timeout as exc:
                last_error = exc
                attempts.append(self._attempt(step, AttemptOutcome.TIMEOUT, error=exc))
                self._logger.info("Relay %s limit %s timed out", step.relay, step.limit)
                continue
            except (requests.RequestException, ValueError) as exc:
                last_error = exc
                attempts.append(self._attempt(step, AttemptOutcome.FAILED, error=exc))
                self._logger.info("Relay %s limit %s failed: %s", step.relay, step.limit, exc)
                continue

            records = parse_report(html, cfg.row_marker)
            if len(records) > cfg.min_records:
                attempts.append(self._attempt(step, AttemptOutcome.ACCEPTED, count=len(records)))
                self._logger.info(
                    "Fetched %s records via %s (limit=%s)", len(records), step.relay, step.limit
                )
                return records

            last_error = ValueError(
                f"Only {len(records)} records from {step.relay} (limit={step.limit})"
            )
            attempts.append(
                self._attempt(step, AttemptOutcome.TOO_FEW_RECORDS, count=len(records), error=last_error)
            )
            self._logger.info("Relay %s limit %s returned too few records", step.relay, step.limit)

        raise SyncExhaustedError(last_error, attempts) from last_error

    def _download(self, url: str, timeout_seconds: int) -> str:
        # One connection per attempt, bounded by the requests timeout.
        resp = requests.get(
            url, headers={"User-Agent": self._settings.user_agent}, timeout=timeout_seconds
        )
        resp.raise_for_status()
        return resp.text

    @staticmethod
    def _attempt(
        step: LadderStep,
        outcome: AttemptOutcome,
        count: int = 0,
        error: Optional[BaseException] = None,
    ) -> FetchAttempt:
        return FetchAttempt(
            endpoint=step.relay,
            size_limit=step.limit,
            outcome=outcome,
            record_count=count,
            error=repr(error) if error is not None else None,
        )
