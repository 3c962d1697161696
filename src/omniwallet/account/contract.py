"""
The account contract: an account controlled by one Ethereum address.

Exposes three entry points:

- `initialize(identity)`: store the controlling address.
- `extend_lifetime()`: refresh every lease the account depends on.
- `check_authorization(payload, claim, contexts)`: the host's authorization
  hook, called whenever something requires this account's authorization.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from omniwallet.host import Env
from omniwallet.types import Bytes20, Bytes32

from .containers import ContractContext, SignedClaim
from .credentials import CredentialStore
from .errors import AuthorizationError
from .verifier import verify_claim

logger = logging.getLogger(__name__)


class AccountContract:
    """Account whose authorization policy is a single Ethereum signature."""

    def __init__(self, env: Env) -> None:
        """
        Bind the contract to its host environment.

        Args:
            env: Host capabilities and address of this contract.
        """
        self.env = env
        self._credentials = CredentialStore(env)

    @property
    def address(self) -> str:
        """Address of this contract."""
        return self.env.contract_address

    def initialize(self, identity: Bytes20 | bytes | str) -> None:
        """
        Set the Ethereum address that controls this account.

        Args:
            identity: 20-byte address, as bytes or hex.

        Raises:
            DecodeError: If `identity` is neither bytes nor a hex string.
            LengthError: If `identity` is not 20 bytes.
            StorageError: If the host cannot persist the credential.
        """
        self._credentials.initialize(Bytes20(identity))

    def extend_lifetime(self) -> None:
        """
        Extend the credential and the contract's leases to the maximum TTL.

        Raises:
            StorageError: If the account has not been initialized.
        """
        self._credentials.extend_lifetime()

    def check_authorization(
        self,
        payload_hash: Bytes32 | bytes,
        claim: SignedClaim | Mapping[str, Any],
        contexts: Sequence[ContractContext] = (),
    ) -> None:
        """
        Authorize `payload_hash` if `claim` carries the controller's signature.

        Returns normally when the request is authorized.

        Args:
            payload_hash: 32-byte payload supplied by the host.
            claim: Signed claim, or a mapping with `address` and `signature`.
            contexts: Invocations being authorized, passed through untouched.

        Raises:
            DecodeError: If the payload or the claim is malformed.
            AuthorizationError: If the request is rejected.
        """
        payload = Bytes32(payload_hash)
        signed_claim = SignedClaim.decode(claim)

        with self.env.checking_authorization(self.address):
            try:
                verify_claim(self.env, payload, signed_claim, contexts)
            except AuthorizationError as e:
                logger.info("Rejected authorization for %s: %s", self.address, e.message)
                raise
