"""
Referential Integrity Checker

Records reference each other only by id, and nothing on disk enforces
those references. These checks run before any destructive operation
so that a delete can never leave a dangling id behind.

IMPORTANT: There is no cascade. A record still in use is refused,
never silently unlinked.
"""

from ledger.models.entities import AssetValue, Earning, Expense
from ledger.storage.interface import IntegrityViolationError
from ledger.storage.store import RecordStore


class IntegrityChecker:
    """Cross-store reference queries."""

    def __init__(
        self,
        expenses: RecordStore[Expense],
        earnings: RecordStore[Earning],
        asset_values: RecordStore[AssetValue],
    ):
        self._expenses = expenses
        self._earnings = earnings
        self._asset_values = asset_values

    def account_in_use(self, account_id: int) -> bool:
        """Check if any expense or earning references the account."""
        return (
            self._expenses.first(lambda e: e.account == account_id) is not None
            or self._earnings.first(lambda e: e.account == account_id) is not None
        )

    def asset_in_use(self, asset_id: int) -> bool:
        return self._asset_values.first(lambda v: v.asset_id == asset_id) is not None

    def require_account_unused(self, account_id: int) -> None:
        if self._expenses.first(lambda e: e.account == account_id) is not None:
            raise IntegrityViolationError(
                "There are still some expenses linked to this account, cannot delete it"
            )
        if self._earnings.first(lambda e: e.account == account_id) is not None:
            raise IntegrityViolationError(
                "There are still some earnings linked to this account, cannot delete it"
            )

    def require_asset_unused(self, asset_id: int) -> None:
        if self.asset_in_use(asset_id):
            raise IntegrityViolationError(
                "There are still some values linked to this asset, cannot delete it"
            )
