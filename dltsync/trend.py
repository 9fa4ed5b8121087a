from __future__ import annotations

from typing import Sequence, Tuple

from .types import DrawRecord

DEFAULT_WINDOW = 30
DEFAULT_SUM = 90
DEFAULT_SPREAD = 5


def predict_sum(
    history: Sequence[DrawRecord],
    window: int = DEFAULT_WINDOW,
    default: int = DEFAULT_SUM,
) -> int:
    """Rounded mean front-number sum over the most recent ``window`` draws.

    ``history`` is expected newest first, so the window is its head.
    """
    recent = history[:window]
    if not recent:
        return default
    sums = [record.front_sum() for record in recent]
    return round(sum(sums) / len(sums))


def sum_window(predicted: int, spread: int = DEFAULT_SPREAD) -> Tuple[int, int]:
    return predicted - spread, predicted + spread
