"""Referential integrity package."""

from ledger.integrity.checker import IntegrityChecker

__all__ = ["IntegrityChecker"]
