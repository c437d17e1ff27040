"""
Record Validation

DESIGN DECISION: The codec accepts anything it can parse, including
negative amounts and empty names. Business rules are checked here,
before a user-supplied record reaches a store:

- names are present and can be written to disk unchanged
- amounts are not negative
- account names are unique among active accounts
- referenced accounts and assets exist
- asset allocations add up to 100%

IMPORTANT: Validation NEVER silently fixes values.
It raises with a message the user can act on.
"""

from decimal import Decimal

from ledger.models.entities import Account, Asset, AssetValue, LedgerTransaction
from ledger.storage.codec import DELIMITER
from ledger.storage.interface import LedgerError, NotFoundError
from ledger.storage.store import RecordStore


class ValidationFailedError(LedgerError):
    """A user-supplied value violates a field constraint."""
    pass


def not_empty(value: str, message: str) -> None:
    if not value.strip():
        raise ValidationFailedError(message)


def not_negative(amount: Decimal, message: str = "The amount cannot be negative") -> None:
    if amount < 0:
        raise ValidationFailedError(message)


def plain_text(value: str, field: str) -> None:
    """Reject text the record format cannot store."""
    if DELIMITER in value:
        raise ValidationFailedError(f"The {field} cannot contain '{DELIMITER}'")
    if "\n" in value or "\r" in value:
        raise ValidationFailedError(f"The {field} cannot contain line breaks")


class RecordValidator:
    """
    Validates records before they are added or updated.

    Needs the account and asset stores to check references and
    name uniqueness.
    """

    def __init__(
        self,
        accounts: RecordStore[Account],
        assets: RecordStore[Asset],
    ):
        self._accounts = accounts
        self._assets = assets

    def validate_account(self, account: Account) -> None:
        not_empty(account.name, "The name of the account cannot be empty")
        plain_text(account.name, "name of the account")
        not_negative(account.amount)

        if account.since > account.until:
            raise ValidationFailedError("An account cannot end before it starts")

        # Closed versions share their name with the open successor
        if not account.is_open:
            return

        duplicate = self._accounts.first(
            lambda other: other.is_open
            and other.name == account.name
            and other.id != account.id
        )
        if duplicate is not None:
            raise ValidationFailedError("An account with this name already exists")

    def validate_transaction(self, transaction: LedgerTransaction) -> None:
        kind = type(transaction).__name__.lower()

        if not self._accounts.exists(transaction.account):
            raise NotFoundError(f"There is no account with id {transaction.account}")

        not_empty(transaction.name, f"The name of the {kind} cannot be empty")
        plain_text(transaction.name, f"name of the {kind}")
        not_negative(transaction.amount)

    def validate_asset(self, asset: Asset) -> None:
        not_empty(asset.name, "The name of the asset cannot be empty")
        plain_text(asset.name, "name of the asset")
        not_empty(asset.currency, "The currency of the asset cannot be empty")
        plain_text(asset.currency, "currency of the asset")

        allocations = (asset.int_stocks, asset.dom_stocks, asset.bonds, asset.cash)
        if any(part < 0 for part in allocations):
            raise ValidationFailedError("Allocation percentages cannot be negative")
        if asset.total_allocation != 100:
            raise ValidationFailedError(
                f"The total allocation of the asset is not 100% ({asset.total_allocation}%)"
            )
        if not 0 <= asset.portfolio_alloc <= 100:
            raise ValidationFailedError("The portfolio allocation must be between 0 and 100")

        duplicate = self._assets.first(
            lambda other: other.name == asset.name and other.id != asset.id
        )
        if duplicate is not None:
            raise ValidationFailedError("An asset with this name already exists")

    def validate_asset_value(self, value: AssetValue) -> None:
        if not self._assets.exists(value.asset_id):
            raise NotFoundError(f"There is no asset with id {value.asset_id}")

        not_negative(value.amount)
