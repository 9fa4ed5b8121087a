from __future__ import annotations

import abc
from typing import List

from ..types import DrawRecord


class RecordSource(abc.ABC):
    """Abstract provider of candidate draw records."""

    name: str = "source"

    @abc.abstractmethod
    async def fetch_records(self) -> List[DrawRecord]:
        """Return every draw record this source can currently provide.

        Implementations decide whether failures are soft (empty list) or
        raised to the caller.
        """

    async def close(self) -> None:
        """Optional hook for connectors that require cleanup."""
        return None
