"""Read-side queries package."""

from ledger.queries.reports import LedgerQueries

__all__ = ["LedgerQueries"]
