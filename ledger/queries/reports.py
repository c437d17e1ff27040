"""
Ledger Queries

Read-only views over the record stores, used by the command
dispatcher and the dashboard. Nothing here mutates a store.

Account lookups are month-aware: an account name can have several
versions, and the right one depends on the day being looked at.
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from ledger.models.entities import (
    BEGINNING,
    Account,
    Asset,
    AssetValue,
    Earning,
    Expense,
    same_month,
)
from ledger.storage.interface import NotFoundError
from ledger.storage.store import RecordStore


class LedgerQueries:
    """Queries spanning the account, transaction and asset stores."""

    def __init__(
        self,
        accounts: RecordStore[Account],
        expenses: RecordStore[Expense],
        earnings: RecordStore[Earning],
        assets: RecordStore[Asset],
        asset_values: RecordStore[AssetValue],
    ):
        self._accounts = accounts
        self._expenses = expenses
        self._earnings = earnings
        self._assets = assets
        self._asset_values = asset_values

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def active_accounts(self) -> list[Account]:
        return self._accounts.find(lambda account: account.is_open)

    def accounts_for_month(self, year: int, month: int) -> list[Account]:
        """Account versions whose window overlaps the given month."""
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])
        return self._accounts.find(
            lambda account: account.since <= last and account.until >= first
        )

    def account_for(self, name: str, on_date: date) -> Account:
        """
        The version of account `name` valid on `on_date`.

        Raises:
            NotFoundError: If no version of that account covers the date
        """
        account = self._accounts.first(
            lambda account: account.name == name and account.covers(on_date)
        )
        if account is None:
            raise NotFoundError(
                f"There is no account named {name!r} on {on_date.isoformat()}"
            )
        return account

    def new_account_since(self) -> date:
        """
        Start date for a newly created account.

        New accounts start right after the latest archive boundary, so
        they line up with the versions created by the last archive run.
        """
        closed = [account.until for account in self._accounts.all() if not account.is_open]
        if not closed:
            return BEGINNING
        return max(closed) + timedelta(days=1)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def expenses_for_month(self, year: int, month: int) -> list[Expense]:
        return self._expenses.find(lambda e: same_month(e.date, year, month))

    def earnings_for_month(self, year: int, month: int) -> list[Earning]:
        return self._earnings.find(lambda e: same_month(e.date, year, month))

    @staticmethod
    def total(records: Iterable) -> Decimal:
        return sum((record.amount for record in records), Decimal("0.00"))

    def account_name(self, account_id: int) -> str:
        """Display name of an account id, tolerant of dangling ids."""
        account = self._accounts.first(lambda account: account.id == account_id)
        return account.name if account is not None else f"#{account_id}"

    # -------------------------------------------------------------------------
    # Assets
    # -------------------------------------------------------------------------

    def asset_by_name(self, name: str) -> Asset:
        asset = self._assets.first(lambda asset: asset.name == name)
        if asset is None:
            raise NotFoundError(f"There is no asset named {name!r}")
        return asset

    def latest_asset_values(self) -> dict[int, AssetValue]:
        """Most recent value of each asset, keyed by asset id."""
        latest: dict[int, AssetValue] = {}
        for value in self._asset_values.all():
            current = latest.get(value.asset_id)
            if current is None or (value.set_date, value.id) > (current.set_date, current.id):
                latest[value.asset_id] = value
        return latest
