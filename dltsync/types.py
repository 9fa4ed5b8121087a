from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

FRONT_COUNT = 5
FRONT_MAX = 35
BACK_COUNT = 2
BACK_MAX = 12

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _valid_pool(values: Sequence[int], count: int, upper: int) -> bool:
    if len(values) != count or len(set(values)) != count:
        return False
    return all(isinstance(n, int) and 1 <= n <= upper for n in values)


@dataclass(frozen=True)
class DrawRecord:
    """One historical draw: period id, date and the 5+2 winning numbers."""

    id: str
    date: str
    front: Sequence[int]
    back: Sequence[int]

    def __post_init__(self) -> None:
        object.__setattr__(self, "front", tuple(self.front))
        object.__setattr__(self, "back", tuple(self.back))

    def is_valid(self) -> bool:
        if not self.id or not (self.id.isascii() and self.id.isdecimal()):
            return False
        return _valid_pool(self.front, FRONT_COUNT, FRONT_MAX) and _valid_pool(
            self.back, BACK_COUNT, BACK_MAX
        )

    def front_sum(self) -> int:
        return sum(self.front)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "front": list(self.front),
            "back": list(self.back),
        }


@dataclass(frozen=True)
class PrizeTierResult:
    tier: int
    name: str
    count: int


class AttemptOutcome(str, Enum):
    ACCEPTED = "accepted"
    TOO_FEW_RECORDS = "too_few_records"
    TIMEOUT = "timeout"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchAttempt:
    endpoint: str
    size_limit: int
    outcome: AttemptOutcome
    record_count: int = 0
    error: Optional[str] = None
