"""
SQLite implementation of the host storage and deployer capabilities.

Both live in one database file so that the credential entry and the
contract leases it depends on are persisted together:

- entries: key-value storage with one lease per key
- leases: record, code and instance leases per contract address

Lease arithmetic is delegated to `Ledger`, exactly as in the in-memory host.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from .exceptions import StorageError
from .interfaces import LeaseKind
from .ledger import Ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntryNamespace:
    """
    Namespace for key-value entries.

    One row per key; `live_until` is the last ledger the entry is live for.
    """

    TABLE_NAME: str = "entries"
    """Table name for entry storage."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS entries (
            key TEXT PRIMARY KEY,
            value BLOB NOT NULL,
            live_until INTEGER NOT NULL
        )
    """
    """SQL to create entries table."""


@dataclass(frozen=True, slots=True)
class LeaseNamespace:
    """Namespace for contract-level leases, keyed by address and lease kind."""

    TABLE_NAME: str = "leases"
    """Table name for lease storage."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS leases (
            address TEXT NOT NULL,
            kind TEXT NOT NULL,
            live_until INTEGER NOT NULL,
            PRIMARY KEY (address, kind)
        )
    """
    """SQL to create leases table."""


ENTRIES = EntryNamespace()
LEASES = LeaseNamespace()


@contextmanager
def _write_transaction(conn: sqlite3.Connection, action: str) -> Iterator[sqlite3.Connection]:
    """
    Run the writes of the block as one committed transaction.

    Raises:
        StorageError: If SQLite rejects any write; the transaction is rolled back.
    """
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StorageError(f"Failed to {action}: {e}") from e


class SQLiteStorage:
    """
    SQLite implementation of the Storage protocol.

    Expired rows are deleted when they are next touched.
    """

    def __init__(self, path: Path | str, ledger: Ledger) -> None:
        """
        Open or create the database.

        Args:
            path: Path to SQLite database file.
                  Use ":memory:" for in-memory database.
            ledger: Clock and limits used for lease arithmetic.

        Raises:
            StorageError: If the database cannot be opened or initialized.
        """
        self._path = Path(path) if isinstance(path, str) else path
        self._ledger = ledger
        try:
            self._conn = sqlite3.connect(str(self._path), check_same_thread=False)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open ledger {self._path}: {e}") from e
        self._conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        """Create tables if they don't exist."""
        with _write_transaction(self._conn, "create schema") as conn:
            conn.execute(ENTRIES.CREATE_TABLE)
            conn.execute(LEASES.CREATE_TABLE)

    @property
    def connection(self) -> sqlite3.Connection:
        """The underlying connection, shared with `SQLiteDeployer`."""
        return self._conn

    def _live_until(self, key: str) -> int | None:
        cursor = self._conn.cursor()
        cursor.execute(
            f"SELECT live_until FROM {ENTRIES.TABLE_NAME} WHERE key = ?",
            (key,),
        )
        row = cursor.fetchone()
        if row is None:
            return None

        live_until = row["live_until"]
        if not self._ledger.is_live(live_until):
            logger.debug("Entry %r expired at ledger %d", key, live_until)
            with _write_transaction(self._conn, f"evict entry {key!r}") as conn:
                conn.execute(f"DELETE FROM {ENTRIES.TABLE_NAME} WHERE key = ?", (key,))
            return None
        return live_until

    def get(self, key: str) -> bytes | None:
        """Read an entry."""
        if self._live_until(key) is None:
            return None

        cursor = self._conn.cursor()
        cursor.execute(f"SELECT value FROM {ENTRIES.TABLE_NAME} WHERE key = ?", (key,))
        return bytes(cursor.fetchone()["value"])

    def set(self, key: str, value: bytes) -> None:
        """Write an entry, keeping the lease of an existing one."""
        exists = self._live_until(key) is not None
        with _write_transaction(self._conn, f"write entry {key!r}") as conn:
            if exists:
                conn.execute(
                    f"UPDATE {ENTRIES.TABLE_NAME} SET value = ? WHERE key = ?",
                    (bytes(value), key),
                )
            else:
                conn.execute(
                    f"INSERT INTO {ENTRIES.TABLE_NAME} (key, value, live_until) VALUES (?, ?, ?)",
                    (key, bytes(value), self._ledger.new_live_until()),
                )

    def has(self, key: str) -> bool:
        """Check if a live entry exists under `key`."""
        return self._live_until(key) is not None

    def extend_ttl(self, key: str, threshold: int, extend_to: int) -> None:
        """Extend the lease of an existing entry."""
        live_until = self._live_until(key)
        if live_until is None:
            raise StorageError(f"Cannot extend TTL of missing entry {key!r}")

        new_live_until = self._ledger.extend(live_until, threshold, extend_to)
        with _write_transaction(self._conn, f"extend entry {key!r}") as conn:
            conn.execute(
                f"UPDATE {ENTRIES.TABLE_NAME} SET live_until = ? WHERE key = ?",
                (new_live_until, key),
            )

    def get_ttl(self, key: str) -> int | None:
        """Remaining TTL of a live entry."""
        live_until = self._live_until(key)
        return None if live_until is None else self._ledger.ttl(live_until)

    def max_ttl(self) -> int:
        """Largest TTL the ledger allows."""
        return self._ledger.max_ttl

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()


class SQLiteDeployer:
    """SQLite implementation of the Deployer protocol."""

    def __init__(self, conn: sqlite3.Connection, ledger: Ledger) -> None:
        """
        Bind to an open database.

        Args:
            conn: Connection whose schema was created by `SQLiteStorage`.
            ledger: Clock and limits used for lease arithmetic.
        """
        self._conn = conn
        self._ledger = ledger

    def is_deployed(self, address: str) -> bool:
        """Check if any lease has ever been recorded for `address`."""
        cursor = self._conn.cursor()
        cursor.execute(
            f"SELECT 1 FROM {LEASES.TABLE_NAME} WHERE address = ? LIMIT 1",
            (address,),
        )
        return cursor.fetchone() is not None

    def deploy(self, address: str) -> None:
        """Create the record, code and instance leases of a new contract."""
        live_until = self._ledger.new_live_until()
        with _write_transaction(self._conn, f"deploy contract {address}") as conn:
            conn.executemany(
                f"INSERT OR REPLACE INTO {LEASES.TABLE_NAME} (address, kind, live_until) "
                "VALUES (?, ?, ?)",
                [(address, kind.value, live_until) for kind in LeaseKind],
            )
        logger.info("Deployed contract %s (live until ledger %d)", address, live_until)

    def _lease(self, address: str, kind: LeaseKind) -> int | None:
        cursor = self._conn.cursor()
        cursor.execute(
            f"SELECT live_until FROM {LEASES.TABLE_NAME} WHERE address = ? AND kind = ?",
            (address, kind.value),
        )
        row = cursor.fetchone()
        return None if row is None else row["live_until"]

    def _extend(self, address: str, kind: LeaseKind, threshold: int, extend_to: int) -> None:
        live_until = self._lease(address, kind)
        if live_until is None:
            raise StorageError(f"No {kind.value} lease for contract {address}")

        new_live_until = self._ledger.extend(live_until, threshold, extend_to)
        with _write_transaction(self._conn, f"extend {kind.value} lease of {address}") as conn:
            conn.execute(
                f"UPDATE {LEASES.TABLE_NAME} SET live_until = ? WHERE address = ? AND kind = ?",
                (new_live_until, address, kind.value),
            )

    def extend_ttl(self, address: str, threshold: int, extend_to: int) -> None:
        """Extend the lease of the contract record."""
        self._extend(address, LeaseKind.CONTRACT, threshold, extend_to)

    def extend_ttl_for_code(self, address: str, threshold: int, extend_to: int) -> None:
        """Extend the lease of the code artifact."""
        self._extend(address, LeaseKind.CODE, threshold, extend_to)

    def extend_ttl_for_contract_instance(
        self, address: str, threshold: int, extend_to: int
    ) -> None:
        """Extend the lease of the contract instance."""
        self._extend(address, LeaseKind.INSTANCE, threshold, extend_to)

    def get_ttl(self, address: str, kind: LeaseKind) -> int | None:
        """Remaining TTL of one of the contract's leases."""
        live_until = self._lease(address, kind)
        return None if live_until is None else self._ledger.ttl(live_until)
