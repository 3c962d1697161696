"""
The host environment handed to every contract call.

Bundles the host capabilities (storage, deployer, crypto) with the address
of the running contract and the authorization requests made during a call.
Contract code never reaches for globals; everything goes through an `Env`.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from omniwallet.crypto import keccak256, recover_public_key
from omniwallet.types import Bytes32, Bytes64, Bytes65

from .exceptions import ReentrancyError
from .interfaces import CryptoHost, Deployer, Storage
from .ledger import InMemoryDeployer, InMemoryStorage, Ledger

logger = logging.getLogger(__name__)


class HostCrypto:
    """CryptoHost backed by the package's own keccak and secp256k1 primitives."""

    def keccak256(self, data: bytes) -> Bytes32:
        """Hash `data` with Keccak-256."""
        return keccak256(data)

    def secp256k1_recover(self, digest: Bytes32, signature: Bytes64, recovery_id: int) -> Bytes65:
        """Recover the uncompressed public key that produced `signature` over `digest`."""
        return recover_public_key(digest, signature, recovery_id)


def generate_contract_address() -> str:
    """Create a random contract address for a local deployment."""
    return "C" + secrets.token_hex(28).upper()


@dataclass
class Env:
    """Capabilities and call state of one contract."""

    storage: Storage
    """Persistent storage of the contract."""

    deployer: Deployer
    """Lifetime operations of the contract itself."""

    contract_address: str
    """Address of the running contract."""

    crypto: CryptoHost = field(default_factory=HostCrypto)
    """Hash and signature recovery primitives."""

    auth_requests: list[str] = field(default_factory=list)
    """Every address passed to `require_auth`, in call order."""

    _checking: set[str] = field(default_factory=set, init=False, repr=False)

    @classmethod
    def in_memory(cls, ledger: Ledger | None = None, contract_address: str | None = None) -> Env:
        """
        Create an environment backed by the in-memory ledger.

        The contract is deployed, so its record, code and instance leases exist.

        Args:
            ledger: Shared ledger clock. A fresh one is created if omitted.
            contract_address: Address of the contract. Random if omitted.
        """
        ledger = ledger if ledger is not None else Ledger()
        address = contract_address or generate_contract_address()
        deployer = InMemoryDeployer(ledger)
        deployer.deploy(address)
        return cls(storage=InMemoryStorage(ledger), deployer=deployer, contract_address=address)

    def require_auth(self, address: str) -> None:
        """
        Request authorization from `address` for the current invocation.

        Raises:
            ReentrancyError: If `address` is an account whose own authorization
                check is currently running.
        """
        if address in self._checking:
            raise ReentrancyError(
                f"Account {address} requested its own authorization while checking it"
            )
        logger.debug("Authorization requested from %s", address)
        self.auth_requests.append(address)

    @contextmanager
    def checking_authorization(self, address: str) -> Iterator[None]:
        """Mark `address` as running its authorization check for the duration of the block."""
        self._checking.add(address)
        try:
            yield
        finally:
            self._checking.discard(address)
