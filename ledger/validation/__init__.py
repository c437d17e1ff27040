"""Validation package."""

from ledger.validation.validator import (
    RecordValidator,
    ValidationFailedError,
    not_empty,
    not_negative,
    plain_text,
)

__all__ = [
    "RecordValidator",
    "ValidationFailedError",
    "not_empty",
    "not_negative",
    "plain_text",
]
