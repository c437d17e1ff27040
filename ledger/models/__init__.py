"""
Data Models Package

This package contains all pydantic models used by the ledger.
Every record persisted to disk conforms to one of these schemas.
"""

from ledger.models.entities import (
    BEGINNING,
    FAR_FUTURE,
    Account,
    Asset,
    AssetValue,
    Earning,
    Expense,
    LedgerRecord,
    LedgerTransaction,
    Money,
    end_of_previous_month,
    new_guid,
    same_month,
)
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "Account",
    "Asset",
    "AssetValue",
    "Earning",
    "Expense",
    "LedgerRecord",
    "LedgerTransaction",
    "Money",
    # Constants and helpers
    "BEGINNING",
    "FAR_FUTURE",
    "end_of_previous_month",
    "new_guid",
    "same_month",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
