"""Unit tests for the contract store and its storage backends."""

import logging
from unittest.mock import Mock

import pytest

from contract_timeline.parsers.serialization import ContractSerializer
from contract_timeline.storage.contract_store import (
    ACTIVE_CONTRACT_KEY,
    CONTRACTS_KEY,
    ContractStore,
)
from contract_timeline.storage.database import DatabaseManager, get_database_url
from contract_timeline.storage.exceptions import StorageError
from contract_timeline.storage.kv_storage import InMemoryKeyValueStorage, SqlKeyValueStorage

from tests.factories import make_contract


@pytest.fixture
def storage():
    return InMemoryKeyValueStorage()


@pytest.fixture
def store(storage):
    return ContractStore(storage)


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'contracts.db'}"


class TestAdd:
    """Tests for adding contracts."""

    def test_add_appends_and_activates(self, store):
        first = make_contract(contract_id="CNT-1")
        second = make_contract(contract_id="CNT-2")

        store.add(first)
        store.add(second)

        assert [c.contract_id for c in store.contracts] == ["CNT-1", "CNT-2"]
        assert store.active_contract == second
        assert len(store) == 2
        assert "CNT-1" in store

    def test_duplicate_id_rejected(self, store):
        store.add(make_contract(contract_id="CNT-1"))

        with pytest.raises(ValueError):
            store.add(make_contract(contract_id="CNT-1"))
        assert len(store) == 1

    def test_add_persists_list_and_active_id(self, store, storage):
        contract = make_contract(contract_id="CNT-1")

        store.add(contract)

        data = storage.snapshot()
        assert ContractSerializer.deserialize_many(data[CONTRACTS_KEY]) == [contract]
        assert data[ACTIVE_CONTRACT_KEY] == "CNT-1"

    def test_contracts_property_is_a_copy(self, store):
        store.add(make_contract())

        store.contracts.clear()

        assert len(store) == 1


class TestRemove:
    """Tests for removing contracts."""

    def test_remove_active_clears_selection(self, store, storage):
        store.add(make_contract(contract_id="CNT-1"))

        store.remove("CNT-1")

        assert store.contracts == []
        assert store.active_contract is None
        assert ACTIVE_CONTRACT_KEY not in storage.snapshot()
        assert storage.snapshot()[CONTRACTS_KEY] == "[]"

    def test_remove_inactive_keeps_selection(self, store):
        store.add(make_contract(contract_id="CNT-1"))
        store.add(make_contract(contract_id="CNT-2"))

        store.remove("CNT-1")

        assert [c.contract_id for c in store.contracts] == ["CNT-2"]
        assert store.active_contract.contract_id == "CNT-2"

    def test_remove_reselected_active_clears_selection(self, store):
        first = make_contract(contract_id="CNT-1")
        store.add(first)
        store.add(make_contract(contract_id="CNT-2"))
        store.set_active(first)

        store.remove("CNT-1")

        assert [c.contract_id for c in store.contracts] == ["CNT-2"]
        assert store.active_contract is None

    def test_remove_unknown_is_noop(self, store):
        store.add(make_contract(contract_id="CNT-1"))
        storage = Mock(wraps=InMemoryKeyValueStorage())
        store._storage = storage

        store.remove("CNT-404")

        assert len(store) == 1
        storage.set.assert_not_called()


class TestSetActive:
    """Tests for selecting the active contract."""

    def test_select_and_clear(self, store, storage):
        first = make_contract(contract_id="CNT-1")
        store.add(first)
        store.add(make_contract(contract_id="CNT-2"))

        store.set_active(first)
        assert store.active_contract == first
        assert storage.snapshot()[ACTIVE_CONTRACT_KEY] == "CNT-1"

        store.set_active(None)
        assert store.active_contract is None
        assert ACTIVE_CONTRACT_KEY not in storage.snapshot()

    def test_unknown_contract_rejected(self, store):
        store.add(make_contract(contract_id="CNT-1"))

        with pytest.raises(KeyError):
            store.set_active(make_contract(contract_id="CNT-404"))
        assert store.active_contract.contract_id == "CNT-1"


class TestLoad:
    """Tests for rehydrating the store."""

    def test_load_restores_contracts_and_active(self, store, storage):
        store.add(make_contract(contract_id="CNT-1"))
        store.add(make_contract(contract_id="CNT-2"))
        store.set_active(store.get("CNT-1"))

        reloaded = ContractStore(storage)
        reloaded.load()

        assert reloaded.contracts == store.contracts
        assert reloaded.active_contract.contract_id == "CNT-1"

    def test_load_empty_storage(self, store):
        store.load()

        assert store.contracts == []
        assert store.active_contract is None

    def test_corrupt_data_starts_empty(self, caplog):
        storage = InMemoryKeyValueStorage({CONTRACTS_KEY: "{not json", ACTIVE_CONTRACT_KEY: "CNT-1"})
        store = ContractStore(storage)

        with caplog.at_level(logging.ERROR):
            store.load()

        assert store.contracts == []
        assert store.active_contract is None
        assert "corrupt" in caplog.text

    def test_dangling_active_id_left_unset(self):
        payload = ContractSerializer.serialize_many([make_contract(contract_id="CNT-1")])
        storage = InMemoryKeyValueStorage({CONTRACTS_KEY: payload, ACTIVE_CONTRACT_KEY: "CNT-9"})
        store = ContractStore(storage)

        store.load()

        assert len(store) == 1
        assert store.active_contract is None

    def test_storage_read_failure_starts_empty(self):
        storage = Mock()
        storage.get.side_effect = StorageError(message="disk unavailable", operation="get")
        store = ContractStore(storage)

        store.load()

        assert store.contracts == []

    def test_custom_keys(self):
        storage = InMemoryKeyValueStorage()
        store = ContractStore(storage, contracts_key="c", active_contract_key="a")

        store.add(make_contract(contract_id="CNT-1"))

        assert set(storage.snapshot()) == {"c", "a"}


class TestWriteFailures:
    """Storage write failures are logged and the in-memory change is kept."""

    def test_failed_write_keeps_memory_state(self, caplog):
        storage = Mock()
        storage.set.side_effect = StorageError(message="quota exceeded", operation="set")
        store = ContractStore(storage)

        with caplog.at_level(logging.ERROR):
            store.add(make_contract(contract_id="CNT-1"))

        assert store.active_contract.contract_id == "CNT-1"
        assert "quota exceeded" in caplog.text


class TestSqlKeyValueStorage:
    """Tests for the SQLAlchemy-backed storage."""

    def test_get_missing_key(self, sqlite_url):
        storage = SqlKeyValueStorage(database_url=sqlite_url)

        assert storage.get("nothing") is None
        storage.close()

    def test_set_overwrite_delete(self, sqlite_url):
        storage = SqlKeyValueStorage(database_url=sqlite_url)

        storage.set("k", "v1")
        storage.set("k", "v2")
        assert storage.get("k") == "v2"

        storage.delete("k")
        assert storage.get("k") is None
        storage.delete("k")
        storage.close()

    def test_store_survives_restart(self, sqlite_url):
        first = SqlKeyValueStorage(database_url=sqlite_url)
        store = ContractStore(first)
        store.add(make_contract(contract_id="CNT-1"))
        store.add(make_contract(contract_id="CNT-2"))
        first.close()

        second = SqlKeyValueStorage(database_url=sqlite_url)
        reloaded = ContractStore(second)
        reloaded.load()

        assert [c.contract_id for c in reloaded.contracts] == ["CNT-1", "CNT-2"]
        assert reloaded.active_contract.contract_id == "CNT-2"
        second.close()

    def test_creates_missing_directory(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'nested' / 'dir' / 'kv.db'}"
        storage = SqlKeyValueStorage(database_url=url)

        storage.set("k", "v")

        assert (tmp_path / "nested" / "dir" / "kv.db").exists()
        storage.close()


class TestDatabaseManager:
    """Tests for the database manager behind the SQL storage."""

    def test_health_check_and_url(self, sqlite_url):
        manager = DatabaseManager(database_url=sqlite_url)

        assert manager.is_sqlite
        assert manager.database_url == sqlite_url
        assert manager.health_check()
        manager.close()

    def test_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("CONTRACT_TIMELINE_DATABASE_URL", "sqlite:///:memory:")

        assert get_database_url() == "sqlite:///:memory:"
        assert get_database_url("sqlite:///explicit.db") == "sqlite:///explicit.db"


class TestUnusableDatabasePath:
    """A database path that cannot be created is a storage failure."""

    @pytest.fixture
    def blocked_url(self, tmp_path):
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("plain file")
        return f"sqlite:///{blocker / 'sub' / 'contracts.db'}"

    @pytest.mark.parametrize("operation, args", [
        ("get", ("k",)),
        ("set", ("k", "v")),
        ("delete", ("k",)),
    ])
    def test_operations_raise_storage_error(self, blocked_url, operation, args):
        storage = SqlKeyValueStorage(database_url=blocked_url)

        with pytest.raises(StorageError) as exc_info:
            getattr(storage, operation)(*args)

        assert exc_info.value.operation == operation

    def test_load_starts_empty(self, blocked_url):
        store = ContractStore(SqlKeyValueStorage(database_url=blocked_url))

        store.load()

        assert store.contracts == []
        assert store.active_contract is None

    def test_add_keeps_memory_state(self, blocked_url):
        store = ContractStore(SqlKeyValueStorage(database_url=blocked_url))

        store.add(make_contract(contract_id="CNT-1"))

        assert store.active_contract.contract_id == "CNT-1"
