"""
Ledger Session

This module ties together all the components for one command
invocation:

1. Load every collection from its backing file
2. Let the caller read and mutate records through this object
3. Save every collection that changed

DESIGN DECISION: The session is the only gate to the stores for
callers. It enforces the boundaries:
- user-supplied records are validated before they are stored
- records still referenced elsewhere are never deleted
- every mutation is audited

Use it as a context manager; collections are saved when the block
exits without an exception.
"""

from datetime import date
from pathlib import Path
from typing import Callable, Optional

from ledger.audit import AuditLogger
from ledger.config import get_settings
from ledger.integrity import IntegrityChecker
from ledger.models.entities import (
    Account,
    Asset,
    AssetValue,
    Earning,
    Expense,
    LedgerRecord,
    end_of_previous_month,
)
from ledger.queries import LedgerQueries
from ledger.storage import (
    FlatFileGateway,
    IntegrityViolationError,
    PersistenceGateway,
    RecordStore,
)
from ledger.validation import RecordValidator, ValidationFailedError
from ledger.versioning import AccountArchiver


ACCOUNTS_FILE = "accounts.data"
EXPENSES_FILE = "expenses.data"
EARNINGS_FILE = "earnings.data"
ASSETS_FILE = "assets.data"
ASSET_VALUES_FILE = "asset_values.data"


class LedgerSession:
    """
    Holds one record store per record type for the lifetime of a command.

    Exposes load/save/all/get/add/update/delete per record type plus
    `account_exists` and `archive_accounts`.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        gateway: Optional[PersistenceGateway] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        if gateway is None:
            gateway = FlatFileGateway(data_dir or get_settings().data_dir)
        self._gateway = gateway
        self.audit = audit_logger or AuditLogger()

        self.accounts: RecordStore[Account] = RecordStore(Account)
        self.expenses: RecordStore[Expense] = RecordStore(Expense)
        self.earnings: RecordStore[Earning] = RecordStore(Earning)
        self.assets: RecordStore[Asset] = RecordStore(Asset)
        self.asset_values: RecordStore[AssetValue] = RecordStore(AssetValue)

        self.integrity = IntegrityChecker(self.expenses, self.earnings, self.asset_values)
        self.validator = RecordValidator(self.accounts, self.assets)
        self.archiver = AccountArchiver(self.accounts, self.expenses, self.earnings)
        self.queries = LedgerQueries(
            self.accounts,
            self.expenses,
            self.earnings,
            self.assets,
            self.asset_values,
        )

    def __enter__(self) -> "LedgerSession":
        self.load_all()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.save_all()
        return False

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _collections(self) -> list[tuple[RecordStore, str]]:
        return [
            (self.accounts, ACCOUNTS_FILE),
            (self.expenses, EXPENSES_FILE),
            (self.earnings, EARNINGS_FILE),
            (self.assets, ASSETS_FILE),
            (self.asset_values, ASSET_VALUES_FILE),
        ]

    def _save(self, store: RecordStore, name: str) -> bool:
        written = self._gateway.save(store, name)
        if written:
            self.audit.log_store_saved(store.kind, len(store))
        return written

    def load_all(self) -> None:
        for store, name in self._collections():
            self._gateway.load(store, name)

    def save_all(self) -> None:
        for store, name in self._collections():
            self._save(store, name)

    def load_accounts(self) -> None:
        self._gateway.load(self.accounts, ACCOUNTS_FILE)

    def save_accounts(self) -> bool:
        return self._save(self.accounts, ACCOUNTS_FILE)

    def load_expenses(self) -> None:
        self._gateway.load(self.expenses, EXPENSES_FILE)

    def save_expenses(self) -> bool:
        return self._save(self.expenses, EXPENSES_FILE)

    def load_earnings(self) -> None:
        self._gateway.load(self.earnings, EARNINGS_FILE)

    def save_earnings(self) -> bool:
        return self._save(self.earnings, EARNINGS_FILE)

    def load_assets(self) -> None:
        self._gateway.load(self.assets, ASSETS_FILE)

    def save_assets(self) -> bool:
        return self._save(self.assets, ASSETS_FILE)

    def load_asset_values(self) -> None:
        self._gateway.load(self.asset_values, ASSET_VALUES_FILE)

    def save_asset_values(self) -> bool:
        return self._save(self.asset_values, ASSET_VALUES_FILE)

    # =========================================================================
    # GENERIC MUTATIONS
    # =========================================================================

    def _validated(
        self,
        store: RecordStore,
        record: LedgerRecord,
        validate: Callable[[LedgerRecord], None],
    ) -> None:
        try:
            validate(record)
        except ValidationFailedError as e:
            self.audit.log_validation_failed(store.kind, str(e))
            raise

    def _add(self, store: RecordStore, record: LedgerRecord, validate) -> int:
        self._validated(store, record, validate)
        record_id = store.add(record)
        self.audit.log_record_added(store.kind, record_id, getattr(record, "name", ""))
        return record_id

    def _update(self, store: RecordStore, record: LedgerRecord, validate) -> None:
        previous = store.get(record.id)
        if record.guid != previous.guid:
            raise ValidationFailedError(f"The guid of {store.kind} {record.id} cannot be changed")

        self._validated(store, record, validate)
        store.update(record)

        changes = {
            field: str(getattr(record, field))
            for field in type(record).model_fields
            if getattr(record, field) != getattr(previous, field)
        }
        self.audit.log_record_updated(store.kind, record.id, changes)

    def _delete(self, store: RecordStore, record_id: int, guard: Optional[Callable[[int], None]] = None) -> None:
        store.get(record_id)

        if guard is not None:
            try:
                guard(record_id)
            except IntegrityViolationError as e:
                self.audit.log_delete_refused(store.kind, record_id, str(e))
                raise

        store.remove(record_id)
        self.audit.log_record_deleted(store.kind, record_id)

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def all_accounts(self) -> list[Account]:
        return self.accounts.all()

    def get_account(self, account_id: int) -> Account:
        return self.accounts.get(account_id)

    def add_account(self, account: Account) -> int:
        return self._add(self.accounts, account, self.validator.validate_account)

    def update_account(self, account: Account) -> None:
        self._update(self.accounts, account, self.validator.validate_account)

    def delete_account(self, account_id: int) -> None:
        """
        Delete an account version.

        Raises:
            NotFoundError: If there is no such account
            IntegrityViolationError: If expenses or earnings reference it
        """
        self._delete(self.accounts, account_id, self.integrity.require_account_unused)

    def account_exists(self, name: str) -> bool:
        """Check if any version of an account with this name exists."""
        return self.accounts.first(lambda account: account.name == name) is not None

    def archive_accounts(self, today: Optional[date] = None) -> dict[int, int]:
        """
        Rotate every open account at the start of the current month.

        The caller is responsible for asking the user for confirmation.
        Returns the mapping from closed account id to successor id.
        """
        today = today or date.today()
        mapping = self.archiver.archive(today)
        self.audit.log_accounts_archived(end_of_previous_month(today), mapping)
        return mapping

    # =========================================================================
    # EXPENSES
    # =========================================================================

    def all_expenses(self) -> list[Expense]:
        return self.expenses.all()

    def get_expense(self, expense_id: int) -> Expense:
        return self.expenses.get(expense_id)

    def add_expense(self, expense: Expense) -> int:
        return self._add(self.expenses, expense, self.validator.validate_transaction)

    def update_expense(self, expense: Expense) -> None:
        self._update(self.expenses, expense, self.validator.validate_transaction)

    def delete_expense(self, expense_id: int) -> None:
        self._delete(self.expenses, expense_id)

    # =========================================================================
    # EARNINGS
    # =========================================================================

    def all_earnings(self) -> list[Earning]:
        return self.earnings.all()

    def get_earning(self, earning_id: int) -> Earning:
        return self.earnings.get(earning_id)

    def add_earning(self, earning: Earning) -> int:
        return self._add(self.earnings, earning, self.validator.validate_transaction)

    def update_earning(self, earning: Earning) -> None:
        self._update(self.earnings, earning, self.validator.validate_transaction)

    def delete_earning(self, earning_id: int) -> None:
        self._delete(self.earnings, earning_id)

    # =========================================================================
    # ASSETS
    # =========================================================================

    def all_assets(self) -> list[Asset]:
        return self.assets.all()

    def get_asset(self, asset_id: int) -> Asset:
        return self.assets.get(asset_id)

    def add_asset(self, asset: Asset) -> int:
        return self._add(self.assets, asset, self.validator.validate_asset)

    def update_asset(self, asset: Asset) -> None:
        self._update(self.assets, asset, self.validator.validate_asset)

    def delete_asset(self, asset_id: int) -> None:
        self._delete(self.assets, asset_id, self.integrity.require_asset_unused)

    def asset_exists(self, name: str) -> bool:
        return self.assets.first(lambda asset: asset.name == name) is not None

    def all_asset_values(self) -> list[AssetValue]:
        return self.asset_values.all()

    def get_asset_value(self, value_id: int) -> AssetValue:
        return self.asset_values.get(value_id)

    def add_asset_value(self, value: AssetValue) -> int:
        return self._add(self.asset_values, value, self.validator.validate_asset_value)

    def update_asset_value(self, value: AssetValue) -> None:
        self._update(self.asset_values, value, self.validator.validate_asset_value)

    def delete_asset_value(self, value_id: int) -> None:
        self._delete(self.asset_values, value_id)
