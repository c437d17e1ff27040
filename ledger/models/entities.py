"""
Core Data Models for Personal Ledger

Every persisted record is a pydantic model with two identities:
- `id`: process-local integer, the join key between collections
- `guid`: globally unique text, stable across saves

DESIGN DECISION: Records are frozen. A change is made by building a
modified copy and handing it back to the store, which is what marks
the collection as changed. Nothing can be edited behind the store's back.

Field declaration order is the on-disk field order.
"""

import datetime as dt
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Annotated
from uuid import uuid4

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


# =============================================================================
# CONSTANTS
# =============================================================================

# Upper bound of the currently active version of an account
FAR_FUTURE = dt.date(2099, 12, 31)

# Lower bound of an account that has no predecessor
BEGINNING = dt.date(1400, 1, 1)

CENTS = Decimal("0.01")


def new_guid() -> str:
    """Generate a fresh globally unique identifier."""
    return str(uuid4())


def _to_cents(value: Decimal) -> Decimal:
    try:
        return value.quantize(CENTS, rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        raise ValueError(f"amount out of range: {value}")


Money = Annotated[Decimal, AfterValidator(_to_cents)]


# =============================================================================
# CALENDAR HELPERS
# =============================================================================

def end_of_previous_month(day: dt.date) -> dt.date:
    """Last calendar day of the month before `day`."""
    return day.replace(day=1) - dt.timedelta(days=1)


def same_month(day: dt.date, year: int, month: int) -> bool:
    return day.year == year and day.month == month


# =============================================================================
# RECORDS
# =============================================================================

class LedgerRecord(BaseModel):
    """
    Base for every persisted record.

    `id` is 0 until the record is added to a store.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(
        default=0,
        ge=0,
        description="Process-local identifier, assigned by the store"
    )
    guid: str = Field(
        default_factory=new_guid,
        min_length=1,
        description="Globally unique identifier, never reassigned"
    )


class Account(LedgerRecord):
    """
    One version of a monetary account.

    Successive versions of the same account share a `name`; each version
    is valid from `since` to `until`, both inclusive. The active version
    ends at FAR_FUTURE.
    """

    name: str
    amount: Money = Decimal("0.00")
    since: dt.date = BEGINNING
    until: dt.date = FAR_FUTURE

    @property
    def is_open(self) -> bool:
        return self.until == FAR_FUTURE

    def covers(self, day: dt.date) -> bool:
        """Check if `day` falls within this version's window."""
        return self.since <= day <= self.until


class LedgerTransaction(LedgerRecord):
    """Money moving in or out of an account on a given day."""

    account: int = Field(
        ...,
        ge=0,
        description="Id of the account version this belongs to"
    )
    name: str
    amount: Money
    date: dt.date


class Expense(LedgerTransaction):
    """Money spent from an account."""


class Earning(LedgerTransaction):
    """Money received on an account."""


class Asset(LedgerRecord):
    """
    An investment holding and its target allocation.

    The four allocation fields are percentages and should sum to 100.
    """

    name: str
    int_stocks: int = 0
    dom_stocks: int = 0
    bonds: int = 0
    cash: int = 0
    currency: str
    portfolio: bool = False
    portfolio_alloc: int = 0

    @property
    def total_allocation(self) -> int:
        return self.int_stocks + self.dom_stocks + self.bonds + self.cash


class AssetValue(LedgerRecord):
    """Value of an asset as of a given day."""

    asset_id: int = Field(..., ge=0)
    amount: Money
    set_date: dt.date
