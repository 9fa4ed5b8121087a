from __future__ import annotations

from typing import Optional, Sequence

from .types import FetchAttempt


class SyncExhaustedError(RuntimeError):
    """Every (relay, limit) pair of the fetch ladder failed.

    Only the last attempt's error is reported; ``attempts`` keeps the full
    ladder log for diagnostics.
    """

    def __init__(
        self,
        last_error: Optional[BaseException],
        attempts: Sequence[FetchAttempt] = (),
    ) -> None:
        message = str(last_error) if last_error is not None else "All sync attempts failed"
        super().__init__(message)
        self.last_error = last_error
        self.attempts = tuple(attempts)


class HistoryInvariantError(ValueError):
    """A record with a non-numeric id reached the history merge."""


class AnalysisUnavailableError(RuntimeError):
    """The external analysis service failed or has no credentials."""
