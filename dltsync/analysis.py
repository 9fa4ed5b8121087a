"""Contract with the external number-analysis service.

The service itself lives outside this package. It receives the history and
the predicted front sum and returns a 5+2 recommendation with a rationale.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from .errors import AnalysisUnavailableError
from .prizes import backtest
from .trend import DEFAULT_SPREAD, predict_sum, sum_window
from .types import BACK_COUNT, FRONT_COUNT, DrawRecord, PrizeTierResult

DEFAULT_RECOMMENDATION = (1, 8, 15, 22, 30, 5, 10)
DEFAULT_EXPLANATION = "Analysis service unavailable; showing the default combination."

logger = logging.getLogger("dltsync.analysis")


@dataclass(frozen=True)
class AnalysisSummary:
    recommendation: Sequence[int]
    explanation: str
    hot_numbers: Sequence[int] = ()
    cold_numbers: Sequence[int] = ()

    @property
    def front(self) -> List[int]:
        return sorted(self.recommendation[:FRONT_COUNT])

    @property
    def back(self) -> List[int]:
        return sorted(self.recommendation[FRONT_COUNT:FRONT_COUNT + BACK_COUNT])


DEFAULT_SUMMARY = AnalysisSummary(recommendation=DEFAULT_RECOMMENDATION, explanation=DEFAULT_EXPLANATION)


class AnalysisClient(Protocol):
    async def analyze(self, history: Sequence[DrawRecord], predicted_sum: int) -> AnalysisSummary:
        ...


@dataclass
class Recommendation:
    summary: AnalysisSummary
    predicted_sum: int
    sum_range: tuple
    backtest: List[PrizeTierResult] = field(default_factory=list)
    fallback: bool = False


async def recommend(
    history: Sequence[DrawRecord],
    client: Optional[AnalysisClient],
    window: int = 30,
    default_sum: int = 90,
    spread: int = DEFAULT_SPREAD,
) -> Recommendation:
    predicted = predict_sum(history, window=window, default=default_sum)
    fallback = False
    try:
        if client is None:
            raise AnalysisUnavailableError("Analysis service is not configured.")
        summary = await client.analyze(history, predicted)
    except Exception as exc:
        logger.exception("Analysis failed, using default recommendation: %s", exc)
        summary = DEFAULT_SUMMARY
        fallback = True

    return Recommendation(
        summary=summary,
        predicted_sum=predicted,
        sum_range=sum_window(predicted, spread),
        backtest=backtest(summary.front, summary.back, history),
        fallback=fallback,
    )
