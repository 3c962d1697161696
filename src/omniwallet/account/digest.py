"""
The digest chain: from host payload to the 32 bytes that were signed.

The host authorizes a 32-byte payload, itself sha256 of the authorization
preimage. The off-chain signer hashes it once more with keccak256 and asks
an Ethereum wallet to `personal_sign` the result, which prefixes and hashes
again:

    auth_hash = keccak256(payload)
    digest    = keccak256("\\x19Ethereum Signed Message:\\n32" || auth_hash)

So three hash rounds separate the original preimage from the signed digest.
Every round is load-bearing: deployed signers produce exactly this chain.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

from omniwallet.crypto import keccak256
from omniwallet.types import Bytes32

ETHEREUM_MESSAGE_PREFIX: Final = b"\x19Ethereum Signed Message:\n32"
"""EIP-191 personal-message prefix for a 32-byte message."""

ETHEREUM_MESSAGE_PREFIX_LEN: Final = 28
"""Length of the prefix, including the decimal length suffix."""

ETHEREUM_PREFIXED_MESSAGE_LEN: Final = 32 + ETHEREUM_MESSAGE_PREFIX_LEN
"""Length of the prefixed buffer that is hashed into the digest."""

Hasher = Callable[[bytes], Bytes32]
"""A 256-bit hash function, keccak256 unless the host supplies its own."""


def auth_hash(payload_hash: Bytes32, hasher: Hasher = keccak256) -> Bytes32:
    """
    Hash the host payload into the message the wallet is asked to sign.

    Args:
        payload_hash: 32-byte payload supplied by the host.
        hasher: Keccak-256 implementation.

    Returns:
        keccak256(payload_hash).
    """
    return hasher(Bytes32(payload_hash))


def personal_message_hash(message: Bytes32, hasher: Hasher = keccak256) -> Bytes32:
    """
    Hash a 32-byte message the way an Ethereum wallet's `personal_sign` does.

    Args:
        message: 32-byte message.
        hasher: Keccak-256 implementation.

    Returns:
        keccak256(prefix || message).
    """
    return hasher(ETHEREUM_MESSAGE_PREFIX + Bytes32(message))


def build_digest(payload_hash: Bytes32, hasher: Hasher = keccak256) -> Bytes32:
    """
    Build the digest a valid signature over `payload_hash` must sign.

    Args:
        payload_hash: 32-byte payload supplied by the host.
        hasher: Keccak-256 implementation.

    Returns:
        keccak256(prefix || keccak256(payload_hash)).
    """
    return personal_message_hash(auth_hash(payload_hash, hasher), hasher)
