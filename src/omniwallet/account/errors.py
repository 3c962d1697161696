"""Rejection codes of the account's authorization policy."""

from __future__ import annotations

from enum import IntEnum

from omniwallet.types import OmniwalletError


class VerificationError(IntEnum):
    """
    Closed set of reasons an authorization request is rejected.

    The numeric values are the contract's on-chain error codes.
    Codes 1, 2, 3, 5 and 7 are reserved for multi-signer and spending-limit
    policies; the single-signer policy never produces them.
    """

    NOT_ENOUGH_SIGNERS = 1
    NEGATIVE_AMOUNT = 2
    BAD_SIGNATURE_ORDER = 3
    UNKNOWN_SIGNER = 4
    """No credential has been stored, or it has expired."""
    INVALID_CONTEXT = 5
    SIGNER_MISMATCH = 6
    """The signature does not recover to the identity it claims."""
    AUTHENTICATION_FAILED = 7
    UNAUTHORIZED_SIGNER = 8
    """The signature is valid but its signer does not control the account."""


class AuthorizationError(OmniwalletError):
    """
    Raised when the account rejects an authorization request.

    Attributes:
        error: The rejection code.
    """

    def __init__(self, error: VerificationError, detail: str | None = None) -> None:
        self.error = error
        self.detail = detail
        msg = error.name if detail is None else f"{error.name}: {detail}"
        super().__init__(msg)
