"""
Tests for the flat file persistence gateway.
"""

from datetime import date
from pathlib import Path
from unittest import mock

import pytest

from ledger.models.entities import Account, Expense
from ledger.storage.flat_file import FlatFileGateway
from ledger.storage.interface import MalformedRecordError
from ledger.storage.store import RecordStore


GUID_A = "0a6e7f2c-1111-4a4a-8b8b-000000000001"
GUID_B = "0a6e7f2c-1111-4a4a-8b8b-000000000002"


@pytest.fixture
def gateway(tmp_path) -> FlatFileGateway:
    return FlatFileGateway(tmp_path)


def write(path: Path, *lines: str) -> None:
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")


class TestLoad:
    """Tests for loading stores."""

    def test_missing_file_gives_empty_store(self, gateway):
        store = RecordStore(Account)
        gateway.load(store, "accounts.data")
        assert len(store) == 0
        assert store.changed is False

    def test_load_preserves_file_order(self, gateway, tmp_path):
        write(
            tmp_path / "accounts.data",
            f"5:{GUID_A}:Savings:10.00:1400-01-01:2099-12-31",
            f"2:{GUID_B}:Checking:20.00:1400-01-01:2099-12-31",
        )
        store = RecordStore(Account)
        gateway.load(store, "accounts.data")
        assert [a.id for a in store.all()] == [5, 2]
        assert store.next_id == 6
        assert store.changed is False

    def test_blank_lines_are_ignored(self, gateway, tmp_path):
        write(tmp_path / "accounts.data", f"1:{GUID_A}:Checking:1.00:1400-01-01:2099-12-31", "")
        store = RecordStore(Account)
        gateway.load(store, "accounts.data")
        assert len(store) == 1

    def test_malformed_line_aborts_load(self, gateway, tmp_path):
        write(
            tmp_path / "accounts.data",
            f"1:{GUID_A}:Checking:1.00:1400-01-01:2099-12-31",
            f"2:{GUID_B}:Broken:1.00",
        )
        store = RecordStore(Account)
        store.add(Account(name="Existing"))

        with pytest.raises(MalformedRecordError, match="accounts.data:2"):
            gateway.load(store, "accounts.data")

        assert [a.name for a in store.all()] == ["Existing"]

    def test_references_are_not_checked(self, gateway, tmp_path):
        write(tmp_path / "expenses.data", f"1:{GUID_A}:42:Orphan:1.00:2024-06-01")
        store = RecordStore(Expense)
        gateway.load(store, "expenses.data")
        assert store.get(1).account == 42


class TestSave:
    """Tests for saving stores."""

    def test_unchanged_store_is_not_written(self, gateway, tmp_path):
        store = RecordStore(Account)
        gateway.load(store, "accounts.data")

        with mock.patch.object(Path, "write_text") as write_text:
            assert gateway.save(store, "accounts.data") is False

        write_text.assert_not_called()
        assert not (tmp_path / "accounts.data").exists()

    def test_loaded_file_is_not_rewritten(self, gateway, tmp_path):
        path = tmp_path / "accounts.data"
        write(path, f"1:{GUID_A}:Checking:1.00:1400-01-01:2099-12-31")
        store = RecordStore(Account)
        gateway.load(store, "accounts.data")

        with mock.patch.object(Path, "write_text") as write_text:
            gateway.save(store, "accounts.data")

        write_text.assert_not_called()

    def test_changed_store_is_written(self, gateway, tmp_path):
        store = RecordStore(Account)
        gateway.load(store, "accounts.data")
        store.add(Account(guid=GUID_A, name="Checking", amount="100"))

        assert gateway.save(store, "accounts.data") is True
        assert store.changed is False
        assert (tmp_path / "accounts.data").read_text() == (
            f"1:{GUID_A}:Checking:100.00:1400-01-01:2099-12-31\n"
        )

    def test_save_then_load_round_trip(self, gateway):
        store = RecordStore(Expense)
        store.add(Expense(account=1, name="Groceries", amount="20", date=date(2024, 6, 15)))
        store.add(Expense(account=2, name="Rent", amount="1500.5", date=date(2024, 6, 1)))
        gateway.save(store, "expenses.data")

        reloaded = RecordStore(Expense)
        gateway.load(reloaded, "expenses.data")
        assert reloaded.all() == store.all()

    def test_save_creates_data_dir(self, tmp_path):
        gateway = FlatFileGateway(tmp_path / "nested" / "dir")
        store = RecordStore(Account)
        store.add(Account(name="Checking"))
        gateway.save(store, "accounts.data")
        assert (tmp_path / "nested" / "dir" / "accounts.data").exists()

    def test_save_overwrites_removed_records(self, gateway, tmp_path):
        store = RecordStore(Account)
        first = store.add(Account(name="A"))
        store.add(Account(name="B"))
        gateway.save(store, "accounts.data")

        store.remove(first)
        gateway.save(store, "accounts.data")

        lines = (tmp_path / "accounts.data").read_text().splitlines()
        assert len(lines) == 1
        assert ":B:" in lines[0]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
