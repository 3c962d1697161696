"""
Capabilities the host environment provides to the account contract.

Defines the Protocols that every host implementation must follow.
Uses structural subtyping - any class with matching methods satisfies the protocol.

Leases
------
Every ledger entry, contract record, code artifact and contract instance
stays accessible only while its lease has not expired. Lease lengths are
counted in ledgers:

    ttl = live_until - current_sequence

`extend_ttl(threshold, extend_to)` is a no-op while `ttl > threshold`,
otherwise it pushes `live_until` out to `current_sequence + extend_to`.
Leases are never shortened.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from omniwallet.types import Bytes32, Bytes64, Bytes65


class LeaseKind(str, Enum):
    """The contract-level leases kept alongside storage entries."""

    CONTRACT = "contract"
    """The deployed contract's own ledger record."""

    CODE = "code"
    """The uploaded code artifact the contract executes."""

    INSTANCE = "instance"
    """The running contract instance and its instance storage."""


class Storage(Protocol):
    """
    Protocol for persistent key-value storage with leases.

    Keys are short ASCII strings; values are raw bytes.
    Expired entries behave exactly like missing ones.
    """

    def get(self, key: str) -> bytes | None:
        """
        Read an entry.

        Args:
            key: Storage key.

        Returns:
            The stored bytes, or None if absent or expired.
        """
        ...

    def set(self, key: str, value: bytes) -> None:
        """
        Write an entry, creating it with the minimum persistent TTL if new.

        Args:
            key: Storage key.
            value: Bytes to store.
        """
        ...

    def has(self, key: str) -> bool:
        """Check if a live entry exists under `key`."""
        ...

    def extend_ttl(self, key: str, threshold: int, extend_to: int) -> None:
        """
        Extend the lease of an existing entry.

        Args:
            key: Storage key.
            threshold: Extend only when the current TTL is at or below this.
            extend_to: New TTL, counted from the current ledger.

        Raises:
            TtlError: If `extend_to` exceeds `max_ttl()`.
            StorageError: If the entry does not exist.
        """
        ...

    def get_ttl(self, key: str) -> int | None:
        """Remaining TTL of a live entry, or None if absent or expired."""
        ...

    def max_ttl(self) -> int:
        """Largest TTL the ledger allows."""
        ...


class Deployer(Protocol):
    """Protocol for the lifetime operations of the deployed contract itself."""

    def extend_ttl(self, address: str, threshold: int, extend_to: int) -> None:
        """Extend the lease of the contract record at `address`."""
        ...

    def extend_ttl_for_code(self, address: str, threshold: int, extend_to: int) -> None:
        """Extend the lease of the code artifact used by `address`."""
        ...

    def extend_ttl_for_contract_instance(
        self, address: str, threshold: int, extend_to: int
    ) -> None:
        """Extend the lease of the contract instance at `address`."""
        ...

    def get_ttl(self, address: str, kind: LeaseKind) -> int | None:
        """Remaining TTL of one of the contract's leases, or None if expired."""
        ...


class CryptoHost(Protocol):
    """Protocol for the hash and signature primitives of the host."""

    def keccak256(self, data: bytes) -> Bytes32:
        """Hash `data` with Keccak-256."""
        ...

    def secp256k1_recover(self, digest: Bytes32, signature: Bytes64, recovery_id: int) -> Bytes65:
        """
        Recover the uncompressed public key that produced `signature` over `digest`.

        Raises:
            RecoveryError: If no public key can be recovered.
        """
        ...
