"""
Ethereum cryptographic primitives.

Keccak-256 hashing and secp256k1 recoverable signatures.
"""

from .keccak import keccak256
from .secp256k1 import (
    UNCOMPRESSED_PUBKEY_SIZE,
    RecoveryError,
    generate_private_key,
    public_key_from_private,
    recover_public_key,
    sign_recoverable,
)

__all__ = [
    "UNCOMPRESSED_PUBKEY_SIZE",
    "RecoveryError",
    "generate_private_key",
    "keccak256",
    "public_key_from_private",
    "recover_public_key",
    "sign_recoverable",
]
