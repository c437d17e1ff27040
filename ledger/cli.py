"""
Command line front end for the ledger.

Usage examples:

    ledger account add Checking 100.00
    ledger expense add Checking 20.00 Groceries
    ledger expense show 6 2024
    ledger account archive

Every command runs inside one LedgerSession: collections are loaded
first and saved afterwards only if the command changed them.
"""

import argparse
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional, Sequence, Type

from pydantic import ValidationError

from ledger import __version__
from ledger.audit import configure_logging
from ledger.config import get_settings
from ledger.models.entities import FAR_FUTURE, Account, Asset, AssetValue, Earning, Expense
from ledger.session import LedgerSession
from ledger.storage import LedgerError
from ledger.storage.store import RecordT
from ledger.validation import ValidationFailedError


# =============================================================================
# ARGUMENT HELPERS
# =============================================================================

def parse_money(text: str) -> Decimal:
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationFailedError(f"Invalid amount: {text!r}")
    if not amount.is_finite():
        raise ValidationFailedError(f"Invalid amount: {text!r}")
    return amount


def parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationFailedError(f"Invalid date (expected YYYY-MM-DD): {text!r}")


def build_record(record_type: Type[RecordT], **values: Any) -> RecordT:
    """Build a record from user input, reporting the first invalid field."""
    try:
        return record_type.model_validate(values)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or record_type.__name__
        raise ValidationFailedError(f"Invalid {field}: {error['msg']}") from e


def print_table(columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    widths = [len(column) for column in columns]
    for row in rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

    def render(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    print(render(columns))
    print(render(["-" * width for width in widths]))
    for row in rows:
        print(render(row))


def _confirm(prompt: str) -> bool:
    answer = input(f"{prompt} [yes/no] ? ")
    return answer.strip().lower() in ("yes", "y")


# =============================================================================
# ACCOUNTS
# =============================================================================

def handle_accounts(session: LedgerSession, args: argparse.Namespace) -> None:
    action = args.action or "show"

    if action == "show":
        accounts = session.queries.active_accounts()
        rows = [[str(a.id), a.name, f"{a.amount:.2f}"] for a in accounts]
        rows.append(["", "Total", f"{session.queries.total(accounts):.2f}"])
        print_table(["ID", "Name", "Amount"], rows)

    elif action == "all":
        print_table(
            ["ID", "Name", "Amount", "Since", "Until"],
            [
                [str(a.id), a.name, f"{a.amount:.2f}", a.since.isoformat(), a.until.isoformat()]
                for a in session.all_accounts()
            ],
        )

    elif action == "add":
        account = build_record(
            Account,
            name=args.name,
            amount=parse_money(args.amount),
            since=session.queries.new_account_since(),
            until=FAR_FUTURE,
        )
        account_id = session.add_account(account)
        print(f"Account {account_id} has been created")

    elif action == "edit":
        account = session.get_account(args.id)
        changes = {}
        if args.name is not None:
            changes["name"] = args.name
        if args.amount is not None:
            changes["amount"] = parse_money(args.amount)
        session.update_account(build_record(Account, **{**account.model_dump(), **changes}))
        print(f"Account {args.id} has been modified")

    elif action == "delete":
        session.delete_account(args.id)
        print(f"Account {args.id} has been deleted")

    elif action == "archive":
        if not args.yes and not _confirm(
            "This command will create new accounts that will be used starting "
            "from the beginning of the current month. Are you sure you want to proceed"
        ):
            print("Nothing has been archived")
            return
        mapping = session.archive_accounts()
        print(f"{len(mapping)} accounts have been archived")


# =============================================================================
# EXPENSES / EARNINGS
# =============================================================================

def handle_transactions(session: LedgerSession, args: argparse.Namespace) -> None:
    is_expense = args.command == "expense"
    kind = "expense" if is_expense else "earning"
    record_type = Expense if is_expense else Earning
    store = session.expenses if is_expense else session.earnings
    action = args.action or "show"

    if action in ("show", "all"):
        if action == "all":
            records = store.all()
        else:
            today = date.today()
            month = args.month or today.month
            year = args.year or today.year
            if is_expense:
                records = session.queries.expenses_for_month(year, month)
            else:
                records = session.queries.earnings_for_month(year, month)
            if not records:
                print(f"No {kind}s for {month}-{year}")
                return

        rows = [
            [str(r.id), r.date.isoformat(), session.queries.account_name(r.account), r.name, f"{r.amount:.2f}"]
            for r in records
        ]
        rows.append(["", "", "", "Total", f"{session.queries.total(records):.2f}"])
        print_table(["ID", "Date", "Account", "Name", "Amount"], rows)

    elif action in ("add", "addd"):
        on_date = parse_date(args.date) if action == "addd" else date.today()
        account = session.queries.account_for(args.account, on_date)
        record = build_record(
            record_type,
            account=account.id,
            name=" ".join(args.name),
            amount=parse_money(args.amount),
            date=on_date,
        )
        if is_expense:
            record_id = session.add_expense(record)
        else:
            record_id = session.add_earning(record)
        print(f"{kind.capitalize()} {record_id} has been created")

    elif action == "edit":
        record = store.get(args.id)
        changes = {}
        if args.date is not None:
            changes["date"] = parse_date(args.date)
        if args.account is not None or args.date is not None:
            # The account version must cover the (possibly new) date
            name = args.account or session.queries.account_name(record.account)
            on_date = changes.get("date", record.date)
            changes["account"] = session.queries.account_for(name, on_date).id
        if args.amount is not None:
            changes["amount"] = parse_money(args.amount)
        if args.name is not None:
            changes["name"] = " ".join(args.name)

        updated = build_record(record_type, **{**record.model_dump(), **changes})
        if is_expense:
            session.update_expense(updated)
        else:
            session.update_earning(updated)
        print(f"{kind.capitalize()} {args.id} has been modified")

    elif action == "delete":
        if is_expense:
            session.delete_expense(args.id)
        else:
            session.delete_earning(args.id)
        print(f"{kind.capitalize()} {args.id} has been deleted")


# =============================================================================
# ASSETS
# =============================================================================

def handle_assets(session: LedgerSession, args: argparse.Namespace) -> None:
    action = args.action or "show"

    if action == "show":
        print_table(
            ["ID", "Name", "Int. Stocks", "Dom. Stocks", "Bonds", "Cash", "Currency"],
            [
                [str(a.id), a.name, f"{a.int_stocks}%", f"{a.dom_stocks}%", f"{a.bonds}%", f"{a.cash}%", a.currency]
                for a in session.all_assets()
            ],
        )

    elif action == "add":
        asset = build_record(
            Asset,
            name=args.name,
            int_stocks=args.int_stocks,
            dom_stocks=args.dom_stocks,
            bonds=args.bonds,
            cash=args.cash,
            currency=args.currency or get_settings().default_currency,
            portfolio=args.portfolio is not None,
            portfolio_alloc=args.portfolio or 0,
        )
        asset_id = session.add_asset(asset)
        print(f"Asset {asset_id} has been created")

    elif action == "delete":
        session.delete_asset(args.id)
        print(f"Asset {args.id} has been deleted")


def handle_asset_values(session: LedgerSession, args: argparse.Namespace) -> None:
    action = args.action or "show"

    if action == "show":
        latest = session.queries.latest_asset_values()
        rows = []
        for asset in session.all_assets():
            value = latest.get(asset.id)
            if value is not None:
                rows.append([str(value.id), asset.name, f"{value.amount:.2f}", asset.currency, value.set_date.isoformat()])
        print_table(["ID", "Asset", "Amount", "Currency", "Date"], rows)

    elif action == "add":
        asset = session.queries.asset_by_name(args.asset)
        value = build_record(
            AssetValue,
            asset_id=asset.id,
            amount=parse_money(args.amount),
            set_date=parse_date(args.date) if args.date else date.today(),
        )
        value_id = session.add_asset_value(value)
        print(f"Asset value {value_id} has been created")

    elif action == "delete":
        session.delete_asset_value(args.id)
        print(f"Asset value {args.id} has been deleted")


# =============================================================================
# PARSER
# =============================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="ledger",
        description="Personal ledger: accounts, expenses, earnings and assets.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument(
        "--data-dir",
        dest="data_dir",
        type=Path,
        help="Directory holding the *.data files (overrides LEDGER_DATA_DIR).",
    )

    commands = ap.add_subparsers(dest="command", required=True)

    # account
    account = commands.add_parser("account", help="Manage accounts.")
    actions = account.add_subparsers(dest="action")
    actions.add_parser("show", help="Show the active accounts.")
    actions.add_parser("all", help="Show every version of every account.")
    add = actions.add_parser("add", help="Create an account.")
    add.add_argument("name")
    add.add_argument("amount")
    edit = actions.add_parser("edit", help="Modify an account.")
    edit.add_argument("id", type=int)
    edit.add_argument("--name")
    edit.add_argument("--amount")
    delete = actions.add_parser("delete", help="Delete an unused account.")
    delete.add_argument("id", type=int)
    archive = actions.add_parser("archive", help="Start new account versions this month.")
    archive.add_argument("--yes", action="store_true", help="Do not ask for confirmation.")

    # expense / earning
    for name in ("expense", "earning"):
        parser = commands.add_parser(name, help=f"Manage {name}s.")
        actions = parser.add_subparsers(dest="action")
        show = actions.add_parser("show", help=f"Show the {name}s of a month.")
        show.add_argument("month", type=int, nargs="?")
        show.add_argument("year", type=int, nargs="?")
        actions.add_parser("all", help=f"Show every {name}.")
        add = actions.add_parser("add", help=f"Add an {name} dated today.")
        add.add_argument("account")
        add.add_argument("amount")
        add.add_argument("name", nargs="+")
        addd = actions.add_parser("addd", help=f"Add an {name} on a given date.")
        addd.add_argument("date")
        addd.add_argument("account")
        addd.add_argument("amount")
        addd.add_argument("name", nargs="+")
        edit = actions.add_parser("edit", help=f"Modify an {name}.")
        edit.add_argument("id", type=int)
        edit.add_argument("--account")
        edit.add_argument("--amount")
        edit.add_argument("--date")
        edit.add_argument("--name", nargs="+")
        delete = actions.add_parser("delete", help=f"Delete an {name}.")
        delete.add_argument("id", type=int)

    # asset
    asset = commands.add_parser("asset", help="Manage assets.")
    actions = asset.add_subparsers(dest="action")
    actions.add_parser("show", help="Show the assets.")
    add = actions.add_parser("add", help="Create an asset.")
    add.add_argument("name")
    add.add_argument("int_stocks", type=int)
    add.add_argument("dom_stocks", type=int)
    add.add_argument("bonds", type=int)
    add.add_argument("cash", type=int)
    add.add_argument("currency", nargs="?", help="Defaults to LEDGER_DEFAULT_CURRENCY.")
    add.add_argument("--portfolio", type=int, metavar="ALLOC", help="Part of the portfolio, with this allocation.")
    delete = actions.add_parser("delete", help="Delete an asset without values.")
    delete.add_argument("id", type=int)

    # asset values
    value = commands.add_parser("value", help="Manage asset values.")
    actions = value.add_subparsers(dest="action")
    actions.add_parser("show", help="Show the latest value of each asset.")
    add = actions.add_parser("add", help="Record the value of an asset.")
    add.add_argument("asset")
    add.add_argument("amount")
    add.add_argument("--date")
    delete = actions.add_parser("delete", help="Delete an asset value.")
    delete.add_argument("id", type=int)

    return ap


HANDLERS = {
    "account": handle_accounts,
    "expense": handle_transactions,
    "earning": handle_transactions,
    "asset": handle_assets,
    "value": handle_asset_values,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point of the `ledger` command."""
    args = _build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    try:
        with LedgerSession(data_dir=args.data_dir) as session:
            HANDLERS[args.command](session, args)
    except LedgerError as e:
        print(e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
