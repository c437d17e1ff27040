"""Shared fixtures for the ledger tests."""

from datetime import date
from decimal import Decimal

import pytest
import structlog

from ledger.models.entities import BEGINNING, FAR_FUTURE, Account
from ledger.session import LedgerSession


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration a test (e.g. the CLI) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def today() -> date:
    return date(2024, 6, 20)


@pytest.fixture
def session(tmp_path) -> LedgerSession:
    """An empty, loaded session backed by a temporary directory."""
    ledger_session = LedgerSession(data_dir=tmp_path)
    ledger_session.load_all()
    return ledger_session


@pytest.fixture
def checking() -> Account:
    return Account(
        name="Checking",
        amount=Decimal("100.00"),
        since=BEGINNING,
        until=FAR_FUTURE,
    )
