"""Flat CSV codec for draw histories.

One header line followed by ``id,date,f1..f5,b1,b2`` rows, numbers written
in their stored order. Decoding is best effort: malformed lines are dropped
and range validation is left to the reconciler.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .types import BACK_COUNT, FRONT_COUNT, DrawRecord

HEADER_SENTINEL = "id"
COLUMNS = (
    [HEADER_SENTINEL, "date"]
    + [f"f{i}" for i in range(1, FRONT_COUNT + 1)]
    + [f"b{i}" for i in range(1, BACK_COUNT + 1)]
)
HEADER = ",".join(COLUMNS)

logger = logging.getLogger("dltsync.codec")


def encode(history: Iterable[DrawRecord]) -> str:
    lines = [HEADER]
    for record in history:
        numbers = [str(n) for n in record.front] + [str(n) for n in record.back]
        lines.append(",".join([record.id, record.date, *numbers]))
    return "\n".join(lines) + "\n"


def decode(text: str) -> List[DrawRecord]:
    records: List[DrawRecord] = []
    dropped = 0
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        parts = [part.strip() for part in line.split(",")]
        if parts[0] == HEADER_SENTINEL:
            continue
        record = _parse_row(parts)
        if record is None:
            dropped += 1
            continue
        records.append(record)
    if dropped:
        logger.debug("Dropped %s malformed history lines", dropped)
    return records


def _parse_row(parts: List[str]) -> Optional[DrawRecord]:
    if len(parts) != len(COLUMNS):
        return None
    try:
        numbers = [int(value) for value in parts[2:]]
    except ValueError:
        return None
    return DrawRecord(
        id=parts[0],
        date=parts[1],
        front=tuple(numbers[:FRONT_COUNT]),
        back=tuple(numbers[FRONT_COUNT:]),
    )
