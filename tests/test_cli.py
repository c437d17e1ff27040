"""
Tests for the command line front end.

Commands run against a temporary data directory; output is checked
through capsys.
"""

from datetime import date

import pytest

from ledger.cli import main


@pytest.fixture
def run(tmp_path):
    def _run(*argv: str) -> int:
        return main(["--data-dir", str(tmp_path), *argv])
    return _run


class TestAccountCommands:
    """Tests for `ledger account`."""

    def test_add_and_show(self, run, tmp_path, capsys):
        assert run("account", "add", "Checking", "100") == 0
        assert "Account 1 has been created" in capsys.readouterr().out

        content = (tmp_path / "accounts.data").read_text()
        assert content.startswith("1:")
        assert content.endswith(":Checking:100.00:1400-01-01:2099-12-31\n")

        assert run("account") == 0
        out = capsys.readouterr().out
        assert "Checking" in out
        assert "Total" in out

    def test_duplicate_name_fails(self, run, capsys):
        run("account", "add", "Checking", "100")
        capsys.readouterr()

        assert run("account", "add", "Checking", "5") == 1
        assert "already exists" in capsys.readouterr().out

    def test_invalid_amount(self, run, capsys):
        assert run("account", "add", "Checking", "ten") == 1
        assert "Invalid amount" in capsys.readouterr().out

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "1e40"])
    def test_unusable_amount(self, run, tmp_path, capsys, amount):
        assert run("account", "add", "Checking", amount) == 1
        assert "Invalid amount" in capsys.readouterr().out
        assert not (tmp_path / "accounts.data").exists()

    def test_edit_with_unusable_amount(self, run, capsys):
        run("account", "add", "Checking", "100")
        capsys.readouterr()

        assert run("account", "edit", "1", "--amount", "1e40") == 1
        assert "Invalid amount" in capsys.readouterr().out

    def test_edit_closed_version(self, run, tmp_path, capsys):
        run("account", "add", "Checking", "100")
        run("account", "archive", "--yes")
        capsys.readouterr()

        assert run("account", "edit", "1", "--amount", "80") == 0
        assert "Account 1 has been modified" in capsys.readouterr().out
        lines = (tmp_path / "accounts.data").read_text().splitlines()
        assert ":Checking:80.00:1400-01-01:" in lines[0]
        assert ":Checking:100.00:" in lines[1]

    def test_edit(self, run, tmp_path, capsys):
        run("account", "add", "Checking", "100")
        assert run("account", "edit", "1", "--amount", "250") == 0
        assert "Account 1 has been modified" in capsys.readouterr().out
        assert ":Checking:250.00:" in (tmp_path / "accounts.data").read_text()

    def test_delete_refused_while_in_use(self, run, tmp_path, capsys):
        run("account", "add", "Checking", "100")
        run("expense", "add", "Checking", "20", "Groceries")
        capsys.readouterr()

        assert run("account", "delete", "1") == 1
        assert "expenses linked to this account" in capsys.readouterr().out
        assert (tmp_path / "accounts.data").read_text().count("\n") == 1

        assert run("expense", "delete", "1") == 0
        assert run("account", "delete", "1") == 0
        assert (tmp_path / "accounts.data").read_text() == ""

    def test_archive_with_confirmation(self, run, tmp_path, capsys, monkeypatch):
        run("account", "add", "Checking", "100")
        monkeypatch.setattr("builtins.input", lambda prompt: "yes")

        assert run("account", "archive") == 0
        assert "1 accounts have been archived" in capsys.readouterr().out
        assert len((tmp_path / "accounts.data").read_text().splitlines()) == 2

    def test_archive_declined(self, run, tmp_path, capsys, monkeypatch):
        run("account", "add", "Checking", "100")
        before = (tmp_path / "accounts.data").read_text()
        monkeypatch.setattr("builtins.input", lambda prompt: "no")

        assert run("account", "archive") == 0
        assert "Nothing has been archived" in capsys.readouterr().out
        assert (tmp_path / "accounts.data").read_text() == before

    def test_archive_yes_flag(self, run, capsys):
        run("account", "add", "Checking", "100")
        assert run("account", "archive", "--yes") == 0
        run("account", "all")
        out = capsys.readouterr().out
        assert "2099-12-31" in out
        assert out.count("Checking") == 2


class TestTransactionCommands:
    """Tests for `ledger expense` and `ledger earning`."""

    def test_add_expense_today(self, run, tmp_path, capsys):
        run("account", "add", "Checking", "100")
        assert run("expense", "add", "Checking", "20", "Weekly", "groceries") == 0
        assert "Expense 1 has been created" in capsys.readouterr().out

        line = (tmp_path / "expenses.data").read_text().strip()
        assert line.endswith(f":1:Weekly groceries:20.00:{date.today().isoformat()}")

    def test_add_earning_on_date(self, run, capsys):
        run("account", "add", "Checking", "100")
        assert run("earning", "addd", "2024-06-25", "Checking", "5000", "Salary") == 0
        capsys.readouterr()

        assert run("earning", "show", "6", "2024") == 0
        out = capsys.readouterr().out
        assert "Salary" in out
        assert "5000.00" in out

    def test_edit_expense(self, run, tmp_path, capsys):
        run("account", "add", "Checking", "100")
        run("expense", "add", "Checking", "20", "Groceries")
        capsys.readouterr()

        assert run("expense", "edit", "1", "--amount", "25.5", "--name", "Weekly", "groceries") == 0
        assert "Expense 1 has been modified" in capsys.readouterr().out
        line = (tmp_path / "expenses.data").read_text().strip()
        assert line.endswith(f":1:Weekly groceries:25.50:{date.today().isoformat()}")

    def test_edit_expense_date_follows_account_version(self, run, tmp_path):
        run("account", "add", "Checking", "100")
        run("account", "archive", "--yes")
        run("expense", "addd", "2020-01-15", "Checking", "20", "Groceries")
        assert ":1:Groceries:20.00:2020-01-15" in (tmp_path / "expenses.data").read_text()

        assert run("expense", "edit", "1", "--date", date.today().isoformat()) == 0
        line = (tmp_path / "expenses.data").read_text().strip()
        assert line.endswith(f":2:Groceries:20.00:{date.today().isoformat()}")

    def test_edit_missing_earning(self, run, capsys):
        assert run("earning", "edit", "7", "--amount", "1") == 1
        assert "There is no earning with id 7" in capsys.readouterr().out

    def test_nan_amount(self, run, capsys):
        run("account", "add", "Checking", "100")
        capsys.readouterr()
        assert run("expense", "add", "Checking", "NaN", "Thing") == 1
        assert "Invalid amount" in capsys.readouterr().out

    def test_show_empty_month(self, run, capsys):
        assert run("expense", "show", "1", "2020") == 0
        assert "No expenses for 1-2020" in capsys.readouterr().out

    def test_unknown_account(self, run, capsys):
        assert run("expense", "add", "Nowhere", "1", "Thing") == 1
        assert "Nowhere" in capsys.readouterr().out

    def test_negative_amount(self, run, capsys):
        run("account", "add", "Checking", "100")
        assert run("expense", "add", "Checking", "-5", "Refund") == 1
        assert "negative" in capsys.readouterr().out


class TestAssetCommands:
    """Tests for `ledger asset` and `ledger value`."""

    def test_asset_and_value(self, run, capsys):
        assert run("asset", "add", "World", "60", "0", "30", "10", "CHF") == 0
        assert run("value", "add", "World", "1500", "--date", "2024-06-01") == 0
        capsys.readouterr()

        assert run("value") == 0
        out = capsys.readouterr().out
        assert "World" in out
        assert "1500.00" in out

        assert run("asset", "delete", "1") == 1
        assert "values linked to this asset" in capsys.readouterr().out

    def test_bad_allocation(self, run, capsys):
        assert run("asset", "add", "World", "60", "0", "30", "0") == 1
        assert "not 100%" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
