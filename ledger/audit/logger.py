"""
Audit Logger

DESIGN DECISION: Every mutation performed through a session is logged.
This provides:
1. Traceability of what each command changed
2. Debugging capability when a command is refused
3. A record of account rotations

The audit logger only writes structured log lines; it never
touches the ledger's data files.
"""

import logging
import sys
from datetime import date
from typing import Optional

import structlog

from ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog on top of the standard logging module.

    Logs go to stderr so command output on stdout stays clean.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


class AuditLogger:
    """
    Central audit logging service.

    Events are rendered through structlog at a level matching
    their severity.
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("ledger.audit")
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        """Events logged so far by this instance, oldest first."""
        return list(self._events)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._events.append(event)
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_record_added(self, entity_type: str, entity_id: int, name: str) -> None:
        self.log(AuditEventBuilder.record_added(entity_type, entity_id, name))

    def log_record_updated(
        self,
        entity_type: str,
        entity_id: int,
        changes: dict[str, str],
    ) -> None:
        self.log(AuditEventBuilder.record_updated(entity_type, entity_id, changes))

    def log_record_deleted(self, entity_type: str, entity_id: int) -> None:
        self.log(AuditEventBuilder.record_deleted(entity_type, entity_id))

    def log_delete_refused(self, entity_type: str, entity_id: int, reason: str) -> None:
        self.log(AuditEventBuilder.delete_refused(entity_type, entity_id, reason))

    def log_validation_failed(self, entity_type: str, reason: str) -> None:
        self.log(AuditEventBuilder.validation_failed(entity_type, reason))

    def log_accounts_archived(self, boundary: date, mapping: dict[int, int]) -> None:
        self.log(AuditEventBuilder.accounts_archived(boundary, mapping))

    def log_store_saved(self, entity_type: str, record_count: int) -> None:
        self.log(AuditEventBuilder.store_saved(entity_type, record_count))
