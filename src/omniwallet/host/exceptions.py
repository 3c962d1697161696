"""Host-level failures, as opposed to policy rejections."""

from __future__ import annotations

from omniwallet.types import OmniwalletError


class HostError(OmniwalletError):
    """Base class for failures raised by host capabilities."""


class StorageError(HostError):
    """A storage read, write or lease operation could not be performed."""


class TtlError(StorageError):
    """
    Raised when a lease extension exceeds the ledger's maximum TTL.

    Attributes:
        requested: The TTL that was asked for.
        max_ttl: The largest TTL the ledger allows.
    """

    def __init__(self, requested: int, max_ttl: int) -> None:
        self.requested = requested
        self.max_ttl = max_ttl
        super().__init__(f"Cannot extend TTL to {requested} ledgers (maximum is {max_ttl})")


class ReentrancyError(HostError):
    """An account requested its own authorization from inside its authorization check."""
