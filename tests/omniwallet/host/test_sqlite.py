"""Tests for the SQLite host implementation."""

from pathlib import Path

import pytest

from omniwallet.account import AccountContract
from omniwallet.config import LedgerConfig
from omniwallet.host import Env, LeaseKind, Ledger, SQLiteDeployer, SQLiteStorage, StorageError

CONFIG = LedgerConfig(max_entry_ttl=1_000, min_persistent_ttl=100)


@pytest.fixture
def small_ledger() -> Ledger:
    """Ledger with short leases."""
    return Ledger(config=CONFIG)


@pytest.fixture
def storage(small_ledger: Ledger):
    """In-memory SQLite storage, closed after the test."""
    db = SQLiteStorage(":memory:", small_ledger)
    yield db
    db.close()


class TestSQLiteStorage:
    """Tests for SQLiteStorage."""

    def test_set_get(self, storage: SQLiteStorage):
        """Test that a written entry reads back."""
        storage.set("pk", b"\x01" * 20)
        assert storage.get("pk") == b"\x01" * 20
        assert storage.has("pk")
        assert storage.get_ttl("pk") == CONFIG.min_persistent_ttl

    def test_missing_entry(self, storage: SQLiteStorage):
        """Test that an unknown key reads as absent."""
        assert storage.get("pk") is None
        assert storage.get_ttl("pk") is None

    def test_overwrite_keeps_lease(self, storage: SQLiteStorage, small_ledger: Ledger):
        """Test that rewriting an entry does not reset its lease."""
        storage.set("pk", b"one")
        small_ledger.advance(30)
        storage.set("pk", b"two")

        assert storage.get("pk") == b"two"
        assert storage.get_ttl("pk") == CONFIG.min_persistent_ttl - 30

    def test_expired_entry_is_deleted(self, storage: SQLiteStorage, small_ledger: Ledger):
        """Test that an expired row is dropped on access."""
        storage.set("pk", b"value")
        small_ledger.advance(CONFIG.min_persistent_ttl + 1)

        assert storage.get("pk") is None
        row = storage.connection.execute("SELECT COUNT(*) AS n FROM entries").fetchone()
        assert row["n"] == 0

    def test_extend_ttl(self, storage: SQLiteStorage):
        """Test that extension pushes the lease to the maximum."""
        storage.set("pk", b"value")
        storage.extend_ttl("pk", storage.max_ttl(), storage.max_ttl())
        assert storage.get_ttl("pk") == CONFIG.max_entry_ttl

    def test_extend_missing_raises(self, storage: SQLiteStorage):
        """Test that only existing entries can be extended."""
        with pytest.raises(StorageError):
            storage.extend_ttl("pk", 100, 100)

    def test_persists_across_connections(self, tmp_path: Path, small_ledger: Ledger):
        """Test that entries survive reopening the database file."""
        path = tmp_path / "ledger.db"
        first = SQLiteStorage(path, small_ledger)
        first.set("pk", b"persisted")
        first.close()

        second = SQLiteStorage(path, small_ledger)
        try:
            assert second.get("pk") == b"persisted"
        finally:
            second.close()


class TestSQLiteDeployer:
    """Tests for SQLiteDeployer."""

    def test_deploy(self, storage: SQLiteStorage, small_ledger: Ledger):
        """Test that deployment records all three leases."""
        deployer = SQLiteDeployer(storage.connection, small_ledger)
        assert not deployer.is_deployed("CX")

        deployer.deploy("CX")

        assert deployer.is_deployed("CX")
        for kind in LeaseKind:
            assert deployer.get_ttl("CX", kind) == CONFIG.min_persistent_ttl

    def test_extend_instance(self, storage: SQLiteStorage, small_ledger: Ledger):
        """Test that the instance lease is extended independently."""
        deployer = SQLiteDeployer(storage.connection, small_ledger)
        deployer.deploy("CX")

        deployer.extend_ttl_for_contract_instance("CX", 1_000, 1_000)

        assert deployer.get_ttl("CX", LeaseKind.INSTANCE) == 1_000
        assert deployer.get_ttl("CX", LeaseKind.CODE) == CONFIG.min_persistent_ttl

    def test_expired_lease(self, storage: SQLiteStorage, small_ledger: Ledger):
        """Test that an expired lease reports no TTL."""
        deployer = SQLiteDeployer(storage.connection, small_ledger)
        deployer.deploy("CX")
        small_ledger.advance(CONFIG.min_persistent_ttl + 1)

        assert deployer.get_ttl("CX", LeaseKind.CONTRACT) is None

    def test_extend_undeployed_raises(self, storage: SQLiteStorage, small_ledger: Ledger):
        """Test that extending a contract that does not exist fails."""
        deployer = SQLiteDeployer(storage.connection, small_ledger)
        with pytest.raises(StorageError):
            deployer.extend_ttl_for_code("CX", 100, 100)


class TestReadOnlyLedger:
    """Tests that SQLite write failures surface as StorageError."""

    @pytest.fixture
    def frozen(self, storage: SQLiteStorage, small_ledger: Ledger):
        """Storage with one entry and one deployed contract, then made read-only."""
        deployer = SQLiteDeployer(storage.connection, small_ledger)
        storage.set("pk", b"value")
        deployer.deploy("CX")
        storage.connection.execute("PRAGMA query_only = ON")
        return storage, deployer

    def test_set(self, frozen):
        """Test that a rejected insert is a StorageError."""
        storage, _ = frozen
        with pytest.raises(StorageError, match="write entry"):
            storage.set("other", b"value")

    def test_extend_entry(self, frozen):
        """Test that a rejected entry extension is a StorageError."""
        storage, _ = frozen
        with pytest.raises(StorageError, match="extend entry"):
            storage.extend_ttl("pk", 1_000, 1_000)
        assert storage.get_ttl("pk") == CONFIG.min_persistent_ttl

    @pytest.mark.parametrize(
        "method", ["extend_ttl", "extend_ttl_for_code", "extend_ttl_for_contract_instance"]
    )
    def test_extend_lease(self, frozen, method: str):
        """Test that a rejected lease extension is a StorageError."""
        _, deployer = frozen
        with pytest.raises(StorageError, match="lease of CX"):
            getattr(deployer, method)("CX", 1_000, 1_000)

    def test_deploy(self, frozen):
        """Test that a rejected deployment is a StorageError."""
        _, deployer = frozen
        with pytest.raises(StorageError, match="deploy contract"):
            deployer.deploy("CY")

    def test_evict_expired(self, frozen, small_ledger: Ledger):
        """Test that a rejected eviction of an expired entry is a StorageError."""
        storage, _ = frozen
        small_ledger.advance(CONFIG.min_persistent_ttl + 1)
        with pytest.raises(StorageError, match="evict entry"):
            storage.get("pk")

    def test_account_extend_lifetime(self, frozen, small_ledger: Ledger):
        """Test that the account sees a host failure, not a raw sqlite error."""
        storage, deployer = frozen
        env = Env(storage=storage, deployer=deployer, contract_address="CX")
        with pytest.raises(StorageError):
            AccountContract(env).extend_lifetime()

    def test_unopenable_path(self, tmp_path: Path, small_ledger: Ledger):
        """Test that a path inside a missing directory cannot be opened."""
        with pytest.raises(StorageError, match="Failed to open"):
            SQLiteStorage(tmp_path / "missing" / "ledger.db", small_ledger)
