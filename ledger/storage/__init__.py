"""
Storage Package

Provides the generic record store, the record codec and the
persistence gateway. Currently implements flat files as the backend,
but designed to be swappable.
"""

from ledger.storage.interface import (
    IntegrityViolationError,
    LedgerError,
    MalformedRecordError,
    NotFoundError,
    PersistenceGateway,
)
from ledger.storage.store import RecordStore
from ledger.storage.codec import DELIMITER, FieldKind, RecordCodec, RecordSchema
from ledger.storage.flat_file import FlatFileGateway

__all__ = [
    # Interfaces
    "PersistenceGateway",
    # Exceptions
    "IntegrityViolationError",
    "LedgerError",
    "MalformedRecordError",
    "NotFoundError",
    # Records
    "RecordStore",
    "DELIMITER",
    "FieldKind",
    "RecordCodec",
    "RecordSchema",
    # Flat file implementation
    "FlatFileGateway",
]
