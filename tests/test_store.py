"""
Tests for the generic record store.

Focus on identity assignment and change tracking.
"""

import pytest

from ledger.models.entities import Account
from ledger.storage.interface import NotFoundError
from ledger.storage.store import RecordStore


@pytest.fixture
def store() -> RecordStore[Account]:
    return RecordStore(Account)


class TestIdentity:
    """Tests for id assignment."""

    def test_first_id_is_one(self, store):
        assert store.add(Account(name="Checking")) == 1

    def test_ids_strictly_increase(self, store):
        ids = [store.add(Account(name=f"Account {i}")) for i in range(10)]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    def test_ids_are_not_reused_after_remove(self, store):
        first = store.add(Account(name="A"))
        second = store.add(Account(name="B"))
        store.remove(second)
        store.remove(first)
        assert store.add(Account(name="C")) == second + 1

    def test_add_keeps_guid(self, store):
        account = Account(name="Checking")
        account_id = store.add(account)
        assert store.get(account_id).guid == account.guid

    def test_add_does_not_touch_caller_record(self, store):
        account = Account(name="Checking")
        store.add(account)
        assert account.id == 0

    def test_load_moves_counter_past_highest_id(self, store):
        store.load_records([Account(id=3, name="A"), Account(id=9, name="B")])
        assert store.next_id == 10
        assert store.add(Account(name="C")) == 10

    def test_load_never_moves_counter_back(self, store):
        for _ in range(5):
            store.add(Account(name="A"))
        store.load_records([Account(id=2, name="B")])
        assert store.next_id == 6


class TestChangeTracking:
    """Tests for the changed flag."""

    def test_new_store_is_clean(self, store):
        assert store.changed is False

    def test_add_marks_changed(self, store):
        store.add(Account(name="Checking"))
        assert store.changed is True

    def test_load_clears_changed(self, store):
        store.add(Account(name="Checking"))
        store.load_records([])
        assert store.changed is False

    def test_update_marks_changed(self, store):
        account_id = store.add(Account(name="Checking"))
        store.mark_clean()
        store.update(store.get(account_id).model_copy(update={"name": "Savings"}))
        assert store.changed is True
        assert store.get(account_id).name == "Savings"

    def test_remove_marks_changed(self, store):
        account_id = store.add(Account(name="Checking"))
        store.mark_clean()
        store.remove(account_id)
        assert store.changed is True
        assert store.exists(account_id) is False


class TestLookup:
    """Tests for get/exists/remove/all."""

    def test_get_missing_raises(self, store):
        with pytest.raises(NotFoundError, match="There is no account with id 4"):
            store.get(4)

    def test_update_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            store.update(Account(id=4, name="Ghost"))

    def test_remove_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            store.remove(1)
        assert store.changed is False

    def test_update_keeps_position(self, store):
        ids = [store.add(Account(name=name)) for name in ("A", "B", "C")]
        store.update(store.get(ids[1]).model_copy(update={"name": "X"}))
        assert [a.name for a in store.all()] == ["A", "X", "C"]

    def test_all_is_a_snapshot(self, store):
        store.add(Account(name="A"))
        snapshot = store.all()
        store.add(Account(name="B"))
        assert len(snapshot) == 1
        assert len(store) == 2

    def test_find_and_first(self, store):
        store.add(Account(name="A"))
        store.add(Account(name="B"))
        assert [a.name for a in store.find(lambda a: a.name != "A")] == ["B"]
        assert store.first(lambda a: a.name == "Z") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
