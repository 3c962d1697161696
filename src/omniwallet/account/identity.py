"""
Ethereum address derivation.

    address = keccak256(uncompressed_pubkey[1:])[12:]

The hash covers the 64-byte x || y coordinates, excluding the 0x04 prefix,
and the address is the last 20 bytes of the digest.
"""

from __future__ import annotations

from eth_utils import to_checksum_address

from omniwallet.crypto import keccak256
from omniwallet.crypto.secp256k1 import UNCOMPRESSED_PUBKEY_PREFIX
from omniwallet.types import Bytes20, Bytes65, DecodeError

from .digest import Hasher


def derive_identity(public_key: Bytes65, hasher: Hasher = keccak256) -> Bytes20:
    """
    Compute the Ethereum address of an uncompressed public key.

    Args:
        public_key: 65-byte uncompressed public key (0x04 || x || y).
        hasher: Keccak-256 implementation.

    Returns:
        20-byte address.

    Raises:
        DecodeError: If the key is not in uncompressed form.
    """
    public_key = Bytes65(public_key)
    if public_key[0] != UNCOMPRESSED_PUBKEY_PREFIX:
        raise DecodeError(
            "Bytes65", f"public key must start with 0x04, got {public_key[0]:#04x}"
        )

    digest = hasher(public_key[1:])
    return Bytes20(digest[12:])


def format_identity(identity: Bytes20) -> str:
    """Render an address in EIP-55 mixed-case checksum form."""
    return to_checksum_address(bytes(Bytes20(identity)))
