"""
In-memory reference ledger.

Implements the `Storage` and `Deployer` protocols against a shared ledger
clock. Used by tests and by anything that needs a host without persistence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from omniwallet.config import DEFAULT_LEDGER_CONFIG, LedgerConfig

from .exceptions import StorageError, TtlError
from .interfaces import LeaseKind

logger = logging.getLogger(__name__)


@dataclass
class Ledger:
    """The ledger clock and its lease limits."""

    config: LedgerConfig = DEFAULT_LEDGER_CONFIG
    """Lease limits of the network."""

    sequence: int = 0
    """Number of the ledger currently being closed."""

    def advance(self, ledgers: int = 1) -> int:
        """Close `ledgers` ledgers and return the new sequence number."""
        if ledgers < 0:
            raise ValueError(f"Cannot move the ledger backwards by {-ledgers}")
        self.sequence += ledgers
        return self.sequence

    @property
    def max_ttl(self) -> int:
        """Largest TTL any lease can be extended to."""
        return self.config.max_entry_ttl

    def new_live_until(self) -> int:
        """Last ledger a freshly written entry is live for."""
        return self.sequence + self.config.min_persistent_ttl

    def is_live(self, live_until: int) -> bool:
        """Check if a lease ending at `live_until` is still live."""
        return live_until >= self.sequence

    def ttl(self, live_until: int) -> int | None:
        """Remaining TTL of a lease, or None if it has expired."""
        if not self.is_live(live_until):
            return None
        return live_until - self.sequence

    def extend(self, live_until: int, threshold: int, extend_to: int) -> int:
        """
        Compute the new end of a lease.

        Args:
            live_until: Current last live ledger of the lease.
            threshold: Extend only when the current TTL is at or below this.
            extend_to: New TTL, counted from the current ledger.

        Returns:
            The new last live ledger, never earlier than `live_until`.

        Raises:
            TtlError: If `extend_to` exceeds the maximum TTL.
            StorageError: If the arguments are inconsistent or the lease has expired.
        """
        if extend_to > self.max_ttl:
            raise TtlError(extend_to, self.max_ttl)
        if threshold < 0 or threshold > extend_to:
            raise StorageError(
                f"Invalid lease extension: threshold={threshold}, extend_to={extend_to}"
            )

        ttl = self.ttl(live_until)
        if ttl is None:
            raise StorageError(f"Lease expired at ledger {live_until}")

        if ttl > threshold:
            return live_until
        return max(live_until, self.sequence + extend_to)


@dataclass
class _Entry:
    value: bytes
    live_until: int


class InMemoryStorage:
    """
    In-memory implementation of the Storage protocol.

    Entries are evicted lazily: an expired entry is dropped on first access.
    """

    def __init__(self, ledger: Ledger) -> None:
        """
        Initialize empty storage.

        Args:
            ledger: Clock and limits shared with the rest of the host.
        """
        self._ledger = ledger
        self._entries: dict[str, _Entry] = {}

    def _live_entry(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self._ledger.is_live(entry.live_until):
            logger.debug("Entry %r expired at ledger %d", key, entry.live_until)
            del self._entries[key]
            return None
        return entry

    def get(self, key: str) -> bytes | None:
        """Read an entry."""
        entry = self._live_entry(key)
        return None if entry is None else entry.value

    def set(self, key: str, value: bytes) -> None:
        """Write an entry, keeping the lease of an existing one."""
        entry = self._live_entry(key)
        if entry is None:
            self._entries[key] = _Entry(bytes(value), self._ledger.new_live_until())
        else:
            entry.value = bytes(value)

    def has(self, key: str) -> bool:
        """Check if a live entry exists under `key`."""
        return self._live_entry(key) is not None

    def extend_ttl(self, key: str, threshold: int, extend_to: int) -> None:
        """Extend the lease of an existing entry."""
        entry = self._live_entry(key)
        if entry is None:
            raise StorageError(f"Cannot extend TTL of missing entry {key!r}")
        entry.live_until = self._ledger.extend(entry.live_until, threshold, extend_to)

    def get_ttl(self, key: str) -> int | None:
        """Remaining TTL of a live entry."""
        entry = self._live_entry(key)
        return None if entry is None else self._ledger.ttl(entry.live_until)

    def max_ttl(self) -> int:
        """Largest TTL the ledger allows."""
        return self._ledger.max_ttl


@dataclass
class InMemoryDeployer:
    """In-memory implementation of the Deployer protocol."""

    ledger: Ledger
    """Clock and limits shared with the rest of the host."""

    _leases: dict[tuple[str, LeaseKind], int] = field(default_factory=dict)

    def deploy(self, address: str) -> None:
        """Create the record, code and instance leases of a new contract."""
        live_until = self.ledger.new_live_until()
        for kind in LeaseKind:
            self._leases[(address, kind)] = live_until
        logger.info("Deployed contract %s (live until ledger %d)", address, live_until)

    def _extend(self, address: str, kind: LeaseKind, threshold: int, extend_to: int) -> None:
        live_until = self._leases.get((address, kind))
        if live_until is None:
            raise StorageError(f"No {kind.value} lease for contract {address}")
        self._leases[(address, kind)] = self.ledger.extend(live_until, threshold, extend_to)

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
        live_until = self._leases.get((address, kind))
        return None if live_until is None else self.ledger.ttl(live_until)
