from __future__ import annotations

import logging
import pathlib
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from .codec import decode, encode
from .datasource import RecordSource
from .errors import HistoryInvariantError
from .seed import SEED_HISTORY
from .types import DrawRecord

History = Tuple[DrawRecord, ...]


def _sort_key(record: DrawRecord) -> int:
    try:
        return int(record.id)
    except (TypeError, ValueError) as exc:
        raise HistoryInvariantError(f"Draw id is not numeric: {record.id!r}") from exc


def merge_history(existing: Iterable[DrawRecord], incoming: Iterable[DrawRecord]) -> History:
    """Merge ``incoming`` into ``existing``.

    Incoming records win on duplicate ids. The result is unique by id and
    sorted by integer id, most recent first.
    """
    seen = {}
    for record in [*incoming, *existing]:
        if record.id not in seen:
            seen[record.id] = record
    return tuple(sorted(seen.values(), key=_sort_key, reverse=True))


class HistoryStore(Protocol):
    def load(self) -> List[DrawRecord]:
        ...

    def save(self, history: Sequence[DrawRecord]) -> None:
        ...


class FileHistoryStore:
    """Persist the encoded history as a single CSV file."""

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)

    def load(self) -> List[DrawRecord]:
        if not self._path.exists():
            return []
        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return []
        return decode(text)

    def save(self, history: Sequence[DrawRecord]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(encode(history), encoding="utf-8")
        tmp_path.replace(self._path)


class Reconciler:
    """Sole owner and writer of the reconciled draw history."""

    def __init__(self, store: HistoryStore, logger: Optional[logging.Logger] = None) -> None:
        self._store = store
        self._history: History = ()
        self._logger = logger or logging.getLogger("dltsync.reconciler")

    @property
    def history(self) -> History:
        return self._history

    async def bootstrap(self, *sources: RecordSource) -> History:
        """Build the startup history from the given sources plus the store.

        Falls back to the embedded seed when nothing yields a valid record.
        """
        collected: List[DrawRecord] = []
        for source in sources:
            collected.extend(await source.fetch_records())
        collected.extend(self._store.load())

        valid = self._valid_only(collected)
        if valid:
            self._history = ()
            self.apply(valid)
        else:
            self._logger.warning("No stored or bundled history; using embedded seed.")
            self._history = SEED_HISTORY
        return self._history

    def apply(self, incoming: Iterable[DrawRecord]) -> History:
        """Merge valid incoming records, persist, and replace the history."""
        valid = self._valid_only(incoming)
        merged = merge_history(self._history, valid)
        self._store.save(merged)
        added = len(merged) - len(self._history)
        self._history = merged
        self._logger.info("History now holds %s records (%+d)", len(merged), added)
        return merged

    def _valid_only(self, records: Iterable[DrawRecord]) -> List[DrawRecord]:
        valid = []
        rejected = 0
        for record in records:
            if record.is_valid():
                valid.append(record)
            else:
                rejected += 1
        if rejected:
            self._logger.warning("Discarded %s invalid draw records", rejected)
        return valid
