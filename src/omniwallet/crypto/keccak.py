"""
Keccak-256, the hash function of the Ethereum execution layer.

This is the original Keccak submission (0x01 domain padding), not NIST SHA3-256.
The two produce different outputs for the same input.
"""

from __future__ import annotations

from Crypto.Hash import keccak

from omniwallet.types import Bytes32


def keccak256(data: bytes) -> Bytes32:
    """
    Hash `data` with Keccak-256.

    Args:
        data: Arbitrary input bytes.

    Returns:
        32-byte digest.
    """
    k = keccak.new(digest_bits=256)
    k.update(bytes(data))
    return Bytes32(k.digest())
