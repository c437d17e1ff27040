"""
Generic Record Store

One store holds every record of one type for the lifetime of a
command. It owns identity assignment and change tracking:

- ids are handed out from a counter that only ever grows
- every mutation sets the `changed` flag
- the flag is cleared only by loading or saving

Records are frozen, so the only way to change one is `update`,
which is also what marks the store changed.
"""

from typing import Callable, Generic, Iterable, Optional, TypeVar

from ledger.models.entities import LedgerRecord
from ledger.storage.interface import NotFoundError


RecordT = TypeVar("RecordT", bound=LedgerRecord)


class RecordStore(Generic[RecordT]):
    """In-memory working set of one record type."""

    def __init__(self, record_type: type[RecordT]):
        self.record_type = record_type
        self._records: list[RecordT] = []
        self._next_id = 1
        self._changed = False

    @property
    def kind(self) -> str:
        """Lower-case record type name used in messages."""
        return self.record_type.__name__.lower()

    @property
    def changed(self) -> bool:
        return self._changed

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._records)

    def mark_changed(self) -> None:
        self._changed = True

    def mark_clean(self) -> None:
        self._changed = False

    def load_records(self, records: Iterable[RecordT]) -> None:
        """
        Replace the working set with persisted records.

        The id counter moves past the highest loaded id but never back.
        """
        self._records = list(records)
        highest = max((record.id for record in self._records), default=0)
        self._next_id = max(self._next_id, highest + 1)
        self._changed = False

    def add(self, record: RecordT) -> int:
        """Store a copy of `record` under a fresh id and return that id."""
        record_id = self._next_id
        self._next_id += 1
        self._records.append(record.model_copy(update={"id": record_id}))
        self._changed = True
        return record_id

    def _index_of(self, record_id: int) -> int:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        raise NotFoundError(f"There is no {self.kind} with id {record_id}")

    def get(self, record_id: int) -> RecordT:
        return self._records[self._index_of(record_id)]

    def exists(self, record_id: int) -> bool:
        return any(record.id == record_id for record in self._records)

    def update(self, record: RecordT) -> None:
        """Replace the stored record carrying the same id."""
        self._records[self._index_of(record.id)] = record
        self._changed = True

    def remove(self, record_id: int) -> None:
        del self._records[self._index_of(record_id)]
        self._changed = True

    def all(self) -> list[RecordT]:
        """Snapshot of every record, in insertion order."""
        return list(self._records)

    def find(self, predicate: Callable[[RecordT], bool]) -> list[RecordT]:
        return [record for record in self._records if predicate(record)]

    def first(self, predicate: Callable[[RecordT], bool]) -> Optional[RecordT]:
        for record in self._records:
            if predicate(record):
                return record
        return None
