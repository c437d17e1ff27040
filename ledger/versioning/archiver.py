"""
Account Archiver

Accounts are never edited across months. Instead, at the start of a
month every open account is rotated:

1. The open version is closed at the last day of the previous month
   (it keeps its id and guid and becomes the historical record)
2. A successor with a fresh guid and the same name and amount is
   opened the following day
3. Expenses and earnings dated in the current month are moved from
   the closed version to its successor

Transactions dated before the boundary keep pointing at the closed
version, so past months still resolve to the account as it was.

GUARANTEES:
- new.since == old.until + 1 day for every rotated account
- an account whose window starts after the boundary (opened by an
  archive run this month, or created this month) is not rotated, so
  archiving twice in the same month is a no-op the second time

There is no rollback. If the loop is interrupted, some accounts may be
rotated and others not.
"""

from datetime import date, timedelta

import structlog

from ledger.models.entities import (
    FAR_FUTURE,
    Account,
    Earning,
    Expense,
    end_of_previous_month,
    new_guid,
    same_month,
)
from ledger.storage.store import RecordStore


logger = structlog.get_logger(__name__)


class AccountArchiver:
    """Rotates open accounts into closed and successor versions."""

    def __init__(
        self,
        accounts: RecordStore[Account],
        expenses: RecordStore[Expense],
        earnings: RecordStore[Earning],
    ):
        self._accounts = accounts
        self._expenses = expenses
        self._earnings = earnings

    def archive(self, today: date) -> dict[int, int]:
        """
        Rotate every open account at the boundary before `today`.

        Returns the mapping from closed account id to successor id.
        """
        boundary = end_of_previous_month(today)
        successor_since = boundary + timedelta(days=1)

        mapping: dict[int, int] = {}

        for account in self._accounts.all():
            if not account.is_open:
                continue
            if account.since > boundary:
                logger.debug("account_opened_this_month", account_id=account.id, name=account.name)
                continue

            successor = Account(
                guid=new_guid(),
                name=account.name,
                amount=account.amount,
                since=successor_since,
                until=FAR_FUTURE,
            )

            self._accounts.update(account.model_copy(update={"until": boundary}))
            mapping[account.id] = self._accounts.add(successor)

            logger.info(
                "account_rotated",
                name=account.name,
                closed_id=account.id,
                successor_id=mapping[account.id],
                boundary=boundary.isoformat(),
            )

        self._remap(self._expenses, mapping, today)
        self._remap(self._earnings, mapping, today)

        self._accounts.mark_changed()
        return mapping

    @staticmethod
    def _remap(store: RecordStore, mapping: dict[int, int], today: date) -> None:
        """Point current-month transactions at the successor accounts."""
        for record in store.all():
            if not same_month(record.date, today.year, today.month):
                continue
            if record.account in mapping:
                store.update(record.model_copy(update={"account": mapping[record.account]}))
