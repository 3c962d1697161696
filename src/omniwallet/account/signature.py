"""
Codec for Ethereum's 65-byte recoverable signature.

Layout: r (32) || s (32) || v (1). Wallets encode the recovery parity as
v = 27 + parity, so 27 and 28 are the only legal selectors here.
"""

from __future__ import annotations

from typing import Final

from omniwallet.types import Bytes64, Bytes65

from .errors import AuthorizationError, VerificationError

RECOVERY_ID_OFFSET: Final = 27
"""Offset wallets add to the raw recovery parity."""

LEGAL_RECOVERY_IDS: Final = (27, 28)
"""The only selectors that map to a recovery parity."""


def split_signature(signature: Bytes65) -> tuple[int, Bytes64]:
    """
    Split a recoverable signature into its selector and its r || s part.

    Args:
        signature: 65-byte recoverable signature.

    Returns:
        Tuple of (selector, core_signature).
    """
    signature = Bytes65(signature)
    return signature[64], Bytes64(signature[:64])


def normalize_recovery_id(selector: int) -> int:
    """
    Map a signature selector to the 0/1 parity used for key recovery.

    Raises:
        AuthorizationError: SIGNER_MISMATCH if `selector` is not 27 or 28.
    """
    if selector not in LEGAL_RECOVERY_IDS:
        raise AuthorizationError(
            VerificationError.SIGNER_MISMATCH, f"illegal recovery selector {selector}"
        )
    return selector - RECOVERY_ID_OFFSET


def encode_signature(core_signature: Bytes64, recovery_id: int) -> Bytes65:
    """
    Append the wallet-style selector for `recovery_id` to an r || s signature.

    Args:
        core_signature: 64-byte signature (r || s).
        recovery_id: Recovery parity, 0 or 1.
    """
    if recovery_id not in (0, 1):
        raise ValueError(f"Recovery id must be 0 or 1, got {recovery_id}")
    return Bytes65(Bytes64(core_signature) + bytes([recovery_id + RECOVERY_ID_OFFSET]))
