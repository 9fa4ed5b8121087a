from __future__ import annotations

from typing import List, Sequence

from sqlalchemy.orm import sessionmaker

from dltsync.codec import decode, encode
from dltsync.types import DrawRecord

from ..db import session_scope
from ..models import StoredValue


class SqlHistoryStore:
    """Durable history kept as encoded CSV text under one key."""

    def __init__(self, factory: sessionmaker, key: str = "dlt_history") -> None:
        self._factory = factory
        self._key = key

    def load(self) -> List[DrawRecord]:
        with session_scope(self._factory) as session:
            row = session.get(StoredValue, self._key)
            text = row.value if row is not None else ""
        return decode(text)

    def save(self, history: Sequence[DrawRecord]) -> None:
        text = encode(history)
        with session_scope(self._factory) as session:
            row = session.get(StoredValue, self._key)
            if row is None:
                session.add(StoredValue(key=self._key, value=text))
            else:
                row.value = text
