"""Account versioning package."""

from ledger.versioning.archiver import AccountArchiver

__all__ = ["AccountArchiver"]
