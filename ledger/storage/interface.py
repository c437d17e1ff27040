"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for persistence.
This allows us to:
1. Keep the record stores ignorant of where their data lives
2. Swap flat files for another backend later
3. Keep business logic decoupled from the on-disk format

The interface is intentionally simple - one read and at most one
write per collection per run.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledger.storage.store import RecordStore


class PersistenceGateway(ABC):
    """
    Abstract interface for loading and saving record stores.

    Any backend must implement these methods.
    """

    @abstractmethod
    def load(self, store: "RecordStore", name: str) -> None:
        """
        Populate a store from its backing collection.

        Args:
            store: The store to populate
            name: Name of the backing collection (e.g. 'accounts.data')

        Raises:
            MalformedRecordError: If a persisted record does not parse
        """
        pass

    @abstractmethod
    def save(self, store: "RecordStore", name: str) -> bool:
        """
        Write a store back to its backing collection if it changed.

        Args:
            store: The store to persist
            name: Name of the backing collection

        Returns:
            True if anything was written
        """
        pass


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class NotFoundError(LedgerError):
    """Record not found in a store."""
    pass


class MalformedRecordError(LedgerError):
    """A persisted record does not match its schema."""
    pass


class IntegrityViolationError(LedgerError):
    """Operation refused because other records still reference the target."""
    pass
