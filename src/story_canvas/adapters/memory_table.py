"""Counter-keyed in-memory table shared by the in-memory stores."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

RecordT = TypeVar("RecordT")


class InMemoryTable(Generic[RecordT]):
    """Insertion-ordered map with a monotonically increasing integer key.

    Keys start at 1 and are never reused, even after deletion.
    """

    def __init__(self) -> None:
        self._rows: dict[int, RecordT] = {}
        self._next_id = 1

    def insert(self, build: Callable[[int], RecordT]) -> RecordT:
        record_id = self._next_id
        self._next_id += 1
        record = build(record_id)
        self._rows[record_id] = record
        return record

    def get(self, record_id: int) -> RecordT | None:
        return self._rows.get(record_id)

    def replace(self, record_id: int, record: RecordT) -> None:
        if record_id not in self._rows:
            raise KeyError(record_id)
        self._rows[record_id] = record

    def delete(self, record_id: int) -> bool:
        return self._rows.pop(record_id, None) is not None

    def select(self, predicate: Callable[[RecordT], bool] | None = None) -> list[RecordT]:
        if predicate is None:
            return list(self._rows.values())
        return [row for row in self._rows.values() if predicate(row)]

    def __len__(self) -> int:
        return len(self._rows)
