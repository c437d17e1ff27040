"""
Record Codec

Maps a record to one delimited text line and back.

Each record type gets a RecordSchema: the ordered list of its fields,
each tagged with a FieldKind. The schema is derived from the pydantic
model's declared fields, so the field order on disk is the declaration
order and every type goes through the same arity check.

Text forms:
- INTEGER: base-10 digits
- TEXT:    verbatim
- MONEY:   fixed two decimals ("-20.00", "0.00")
- DATE:    ISO "YYYY-MM-DD"
- FLAG:    "1" or "0"

LIMITATION: the delimiter is not escaped. A TEXT value containing it
cannot be read back; callers must keep it out of user input.
"""

import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Generic, Sequence

from pydantic import ValidationError

from ledger.storage.interface import MalformedRecordError
from ledger.storage.store import RecordT


DELIMITER = ":"


class FieldKind(str, Enum):
    """On-disk representation of a field."""
    INTEGER = "integer"
    TEXT = "text"
    MONEY = "money"
    DATE = "date"
    FLAG = "flag"


_KIND_BY_TYPE = {
    int: FieldKind.INTEGER,
    str: FieldKind.TEXT,
    Decimal: FieldKind.MONEY,
    dt.date: FieldKind.DATE,
    bool: FieldKind.FLAG,
}

_INTEGER_RE = re.compile(r"[0-9]+")
_MONEY_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _parse_integer(text: str) -> int:
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError(f"not an integer: {text!r}")
    return int(text)


def _parse_money(text: str) -> Decimal:
    if not _MONEY_RE.fullmatch(text):
        raise ValueError(f"not a money amount: {text!r}")
    return Decimal(text)


def _parse_date(text: str) -> dt.date:
    if not _DATE_RE.fullmatch(text):
        raise ValueError(f"not a date: {text!r}")
    return dt.date.fromisoformat(text)


def _parse_flag(text: str) -> bool:
    if text not in ("0", "1"):
        raise ValueError(f"not a flag: {text!r}")
    return text == "1"


_PARSERS: dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.INTEGER: _parse_integer,
    FieldKind.TEXT: str,
    FieldKind.MONEY: _parse_money,
    FieldKind.DATE: _parse_date,
    FieldKind.FLAG: _parse_flag,
}

_FORMATTERS: dict[FieldKind, Callable[[Any], str]] = {
    FieldKind.INTEGER: str,
    FieldKind.TEXT: str,
    FieldKind.MONEY: lambda value: f"{value:.2f}",
    FieldKind.DATE: lambda value: value.isoformat(),
    FieldKind.FLAG: lambda value: "1" if value else "0",
}


class RecordSchema:
    """Ordered, kind-tagged field list of one record type."""

    def __init__(self, record_type: type, fields: Sequence[tuple[str, FieldKind]]):
        self.record_type = record_type
        self.fields = tuple(fields)

    @classmethod
    def for_model(cls, record_type: type) -> "RecordSchema":
        fields = []
        for name, info in record_type.model_fields.items():
            kind = _KIND_BY_TYPE.get(info.annotation)
            if kind is None:
                raise TypeError(
                    f"{record_type.__name__}.{name} has no on-disk form "
                    f"({info.annotation!r})"
                )
            fields.append((name, kind))
        return cls(record_type, fields)

    @property
    def arity(self) -> int:
        return len(self.fields)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.fields]


class RecordCodec(Generic[RecordT]):
    """Encodes and decodes records of one type according to its schema."""

    def __init__(self, schema: RecordSchema):
        self.schema = schema

    @classmethod
    def for_type(cls, record_type: type[RecordT]) -> "RecordCodec[RecordT]":
        return _codec_for(record_type)

    def encode(self, record: RecordT) -> list[str]:
        return [
            _FORMATTERS[kind](getattr(record, name))
            for name, kind in self.schema.fields
        ]

    def encode_line(self, record: RecordT) -> str:
        return DELIMITER.join(self.encode(record))

    def decode(self, fields: Sequence[str]) -> RecordT:
        type_name = self.schema.record_type.__name__
        if len(fields) != self.schema.arity:
            raise MalformedRecordError(
                f"{type_name} record has {len(fields)} fields, "
                f"expected {self.schema.arity}"
            )

        values = {}
        for (name, kind), text in zip(self.schema.fields, fields):
            try:
                values[name] = _PARSERS[kind](text)
            except (ValueError, InvalidOperation) as e:
                raise MalformedRecordError(
                    f"Invalid {type_name}.{name}: {e}"
                ) from e

        try:
            return self.schema.record_type.model_validate(values)
        except ValidationError as e:
            raise MalformedRecordError(f"Invalid {type_name} record: {e}") from e

    def decode_line(self, line: str) -> RecordT:
        return self.decode(line.split(DELIMITER))


@lru_cache(maxsize=None)
def _codec_for(record_type: type) -> RecordCodec:
    return RecordCodec(RecordSchema.for_model(record_type))
