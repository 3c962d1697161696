"""
The account's single credential and the leases that keep it reachable.

The credential is one 20-byte address stored under a fixed key. It is only
useful while four leases are live at once: the storage entry itself, the
contract record, the code artifact and the contract instance. Extending
them together keeps any one of them from expiring on its own.
"""

from __future__ import annotations

import logging
from typing import Final

from omniwallet.host import Env
from omniwallet.types import Bytes20

from .errors import AuthorizationError, VerificationError
from .identity import format_identity

logger = logging.getLogger(__name__)

STORAGE_KEY_PK: Final = "pk"
"""Storage key of the credential."""


class CredentialStore:
    """Reads, writes and keeps alive the account's credential."""

    def __init__(self, env: Env) -> None:
        self._env = env

    def initialize(self, identity: Bytes20) -> None:
        """
        Store `identity` as the account's only credential and extend all leases.

        Re-initialization replaces the previous credential.

        Raises:
            StorageError: If the host cannot write the entry.
        """
        identity = Bytes20(identity)
        previous = self._env.storage.get(STORAGE_KEY_PK)
        if previous is not None and previous != identity:
            logger.warning(
                "Replacing credential of %s: %s -> %s",
                self._env.contract_address,
                format_identity(Bytes20.decode_bytes(previous)),
                format_identity(identity),
            )

        self._env.storage.set(STORAGE_KEY_PK, bytes(identity))
        logger.info(
            "Stored credential %s for %s", format_identity(identity), self._env.contract_address
        )

        self.extend_lifetime()

    def read(self) -> Bytes20:
        """
        Load the stored credential.

        Raises:
            AuthorizationError: UNKNOWN_SIGNER if no credential is stored.
            LengthError: If the stored value is not 20 bytes.
        """
        stored = self._env.storage.get(STORAGE_KEY_PK)
        if stored is None:
            raise AuthorizationError(VerificationError.UNKNOWN_SIGNER, "no credential stored")
        return Bytes20.decode_bytes(stored)

    def extend_lifetime(self) -> None:
        """
        Extend the credential entry and the contract's leases to the maximum TTL.

        Raises:
            StorageError: If an entry or lease does not exist.
        """
        storage = self._env.storage
        deployer = self._env.deployer
        address = self._env.contract_address

        # Threshold equal to the target means the extension always applies.
        max_ttl = storage.max_ttl()

        storage.extend_ttl(STORAGE_KEY_PK, max_ttl, max_ttl)
        deployer.extend_ttl(address, max_ttl, max_ttl)
        deployer.extend_ttl_for_code(address, max_ttl, max_ttl)
        deployer.extend_ttl_for_contract_instance(address, max_ttl, max_ttl)

        logger.debug("Extended leases of %s to %d ledgers", address, max_ttl)
