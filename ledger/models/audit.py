"""
Audit Models for Personal Ledger

Every mutation performed through a session is described by an AuditEvent.
This provides:
1. Traceability of every add, edit and delete
2. A record of what an archive run rotated
3. Debugging information when a command is refused

DESIGN DECISION: Audit events are only emitted as structured log lines.
They are never written to the ledger's own data files.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record changes
    RECORD_ADDED = "record_added"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    DELETE_REFUSED = "delete_refused"
    VALIDATION_FAILED = "validation_failed"

    # Versioning
    ACCOUNTS_ARCHIVED = "accounts_archived"

    # Persistence
    STORE_SAVED = "store_saved"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of record (e.g., 'account', 'expense')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Id of the record this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("account", 3, "Checking")
        event = AuditEventBuilder.accounts_archived(boundary, {1: 4})
    """

    @staticmethod
    def record_added(
        entity_type: str,
        entity_id: int,
        name: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} {entity_id} has been created",
            details={"name": name},
        )

    @staticmethod
    def record_updated(
        entity_type: str,
        entity_id: int,
        changes: dict[str, str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} {entity_id} has been modified",
            details={"changes": changes},
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        entity_id: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} {entity_id} has been deleted",
        )

    @staticmethod
    def delete_refused(
        entity_type: str,
        entity_id: int,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_REFUSED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Refused to delete {entity_type} {entity_id}",
            error_message=reason,
        )

    @staticmethod
    def validation_failed(
        entity_type: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"Invalid {entity_type} rejected",
            error_message=reason,
        )

    @staticmethod
    def accounts_archived(
        boundary: date,
        mapping: dict[int, int],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_ARCHIVED,
            entity_type="account",
            description=f"{len(mapping)} accounts archived at {boundary.isoformat()}",
            details={
                "boundary": boundary.isoformat(),
                "mapping": {str(old): new for old, new in mapping.items()},
            },
        )

    @staticmethod
    def store_saved(
        entity_type: str,
        record_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type=entity_type,
            description=f"Saved {record_count} {entity_type} records",
            details={"record_count": record_count},
        )
