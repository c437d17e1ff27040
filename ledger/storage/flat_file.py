"""
Flat File Storage Implementation

DESIGN DECISION: Each record type lives in its own text file under the
data directory, one record per line, fields joined by the codec's
delimiter. No header, no trailing metadata.

TRADEOFFS:
- Whole-file rewrite on save (a crash mid-write can corrupt the file)
- No file locking (last writer wins)
- A single bad line makes the whole file unreadable; we never skip
  lines silently

The implementation follows the abstract interface, so the stores do
not know they are backed by files.
"""

from pathlib import Path

import structlog

from ledger.storage.codec import RecordCodec
from ledger.storage.interface import MalformedRecordError, PersistenceGateway
from ledger.storage.store import RecordStore


logger = structlog.get_logger(__name__)


class FlatFileGateway(PersistenceGateway):
    """Loads and saves record stores as delimited text files."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / name

    def load(self, store: RecordStore, name: str) -> None:
        """
        Read `name` into `store`.

        A missing file yields an empty store. The store is left untouched
        if any line fails to decode.
        """
        path = self.path_for(name)

        if not path.exists():
            store.load_records([])
            logger.debug("store_file_missing", path=str(path), kind=store.kind)
            return

        codec = RecordCodec.for_type(store.record_type)
        records = []

        with path.open(encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                line = line.rstrip("\r\n")
                if not line:
                    continue
                try:
                    records.append(codec.decode_line(line))
                except MalformedRecordError as e:
                    raise MalformedRecordError(f"{path}:{line_number}: {e}") from e

        store.load_records(records)
        logger.debug("store_loaded", path=str(path), kind=store.kind, records=len(records))

    def save(self, store: RecordStore, name: str) -> bool:
        """Rewrite `name` from `store`, only if the store changed."""
        path = self.path_for(name)

        if not store.changed:
            logger.debug("store_save_skipped", path=str(path), kind=store.kind)
            return False

        codec = RecordCodec.for_type(store.record_type)
        content = "".join(codec.encode_line(record) + "\n" for record in store.all())

        self.data_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        store.mark_clean()

        logger.info("store_saved", path=str(path), kind=store.kind, records=len(store))
        return True
