"""Historical prize-tier backtest for a 5+2 combination.

The tier table is policy data kept apart from the matching code so that tier
definitions can be checked on their own.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Sequence, Tuple

from .types import BACK_COUNT, BACK_MAX, FRONT_COUNT, FRONT_MAX, DrawRecord, PrizeTierResult


@dataclass(frozen=True)
class PrizeTier:
    tier: int
    name: str
    matches: FrozenSet[Tuple[int, int]]


PRIZE_TIERS: Tuple[PrizeTier, ...] = (
    PrizeTier(1, "First Prize", frozenset({(5, 2)})),
    PrizeTier(2, "Second Prize", frozenset({(5, 1)})),
    PrizeTier(3, "Third Prize", frozenset({(5, 0)})),
    PrizeTier(4, "Fourth Prize", frozenset({(4, 2)})),
    PrizeTier(5, "Fifth Prize", frozenset({(4, 1)})),
    PrizeTier(6, "Sixth Prize", frozenset({(3, 2)})),
    PrizeTier(7, "Seventh Prize", frozenset({(4, 0)})),
    PrizeTier(8, "Eighth Prize", frozenset({(3, 1), (2, 2)})),
    PrizeTier(9, "Ninth Prize", frozenset({(3, 0), (2, 1), (1, 2), (0, 2)})),
)


def tier_lookup(tiers: Iterable[PrizeTier] = PRIZE_TIERS) -> Dict[Tuple[int, int], PrizeTier]:
    lookup: Dict[Tuple[int, int], PrizeTier] = {}
    for tier in tiers:
        for pair in tier.matches:
            if pair in lookup:
                raise ValueError(f"Match pair {pair} assigned to more than one tier")
            lookup[pair] = tier
    return lookup


def validate_combination(front: Sequence[int], back: Sequence[int]) -> None:
    if len(front) != FRONT_COUNT or len(set(front)) != FRONT_COUNT:
        raise ValueError(f"Front selection needs {FRONT_COUNT} distinct numbers.")
    if len(back) != BACK_COUNT or len(set(back)) != BACK_COUNT:
        raise ValueError(f"Back selection needs {BACK_COUNT} distinct numbers.")
    if not all(1 <= n <= FRONT_MAX for n in front):
        raise ValueError(f"Front numbers must be between 1 and {FRONT_MAX}.")
    if not all(1 <= n <= BACK_MAX for n in back):
        raise ValueError(f"Back numbers must be between 1 and {BACK_MAX}.")


def backtest(
    front: Iterable[int],
    back: Iterable[int],
    history: Iterable[DrawRecord],
    tiers: Iterable[PrizeTier] = PRIZE_TIERS,
) -> List[PrizeTierResult]:
    """Count how often the combination would have hit each tier.

    Only tiers with a non-zero count are returned, ordered by tier number.
    """
    candidate_front = frozenset(front)
    candidate_back = frozenset(back)
    lookup = tier_lookup(tiers)

    counts: Counter = Counter()
    for record in history:
        pair = (
            len(candidate_front.intersection(record.front)),
            len(candidate_back.intersection(record.back)),
        )
        tier = lookup.get(pair)
        if tier is not None:
            counts[tier] += 1

    return [
        PrizeTierResult(tier=tier.tier, name=tier.name, count=count)
        for tier, count in sorted(counts.items(), key=lambda item: item[0].tier)
    ]


def prize_table(
    results: Iterable[PrizeTierResult], tiers: Iterable[PrizeTier] = PRIZE_TIERS
) -> List[PrizeTierResult]:
    """Expand backtest results to every tier, filling zero counts."""
    counts = {result.tier: result.count for result in results}
    return [
        PrizeTierResult(tier=tier.tier, name=tier.name, count=counts.get(tier.tier, 0))
        for tier in sorted(tiers, key=lambda t: t.tier)
    ]
