"""
Client side of the protocol: producing claims the account accepts.

A wallet asked to `personal_sign` the 32-byte auth hash signs
keccak256(prefix || auth_hash), which is exactly `build_digest(payload)`.
These helpers do the same with a raw secp256k1 key.
"""

from __future__ import annotations

import logging

from omniwallet.crypto import public_key_from_private, sign_recoverable
from omniwallet.types import Bytes20, Bytes32, Bytes65

from .containers import SignedClaim
from .digest import auth_hash, personal_message_hash
from .identity import derive_identity, format_identity
from .signature import encode_signature

logger = logging.getLogger(__name__)


def identity_from_private_key(private_key: Bytes32) -> Bytes20:
    """Ethereum address controlled by `private_key`."""
    return derive_identity(public_key_from_private(private_key))


def sign_digest(private_key: Bytes32, digest: Bytes32) -> Bytes65:
    """
    Produce a wallet-style recoverable signature over a 32-byte digest.

    Args:
        private_key: 32-byte secp256k1 private key.
        digest: 32-byte digest, signed as-is.

    Returns:
        65-byte signature r || s || v with v in {27, 28}.
    """
    core_signature, recovery_id = sign_recoverable(private_key, digest)
    return encode_signature(core_signature, recovery_id)


def sign_payload(private_key: Bytes32, payload_hash: Bytes32) -> SignedClaim:
    """
    Sign a host payload for submission to the account.

    Args:
        private_key: 32-byte secp256k1 private key of the controller.
        payload_hash: 32-byte payload the host will authorize.

    Returns:
        Claim carrying the signer's address and signature.
    """
    message = auth_hash(payload_hash)
    signature = sign_digest(private_key, personal_message_hash(message))
    address = identity_from_private_key(private_key)

    logger.debug("Signed auth hash %s as %s", message.hex(), format_identity(address))
    return SignedClaim(address=address, signature=signature)
