"""Values exchanged between the host, the signer and the account."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from typing_extensions import Self

from omniwallet.types import Bytes20, Bytes65, DecodeError, StrictBaseModel


class SignedClaim(StrictBaseModel):
    """
    A signature together with the address its producer claims to own.

    Nothing here is trusted: the verifier recovers the signer itself and
    compares the result with `address`.
    """

    address: Bytes20
    """The Ethereum address the caller claims signed the payload."""

    signature: Bytes65
    """Recoverable signature: r (32) || s (32) || v (1)."""

    @classmethod
    def decode(cls, value: SignedClaim | Mapping[str, Any]) -> Self:
        """
        Decode a claim received at the account boundary.

        Accepts a claim instance or a mapping with `address` and `signature`
        entries holding bytes or hex strings.

        Raises:
            DecodeError: If a field is missing, extra, or of the wrong length.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise DecodeError(cls.__name__, f"expected a mapping, got {type(value).__name__}")

        fields = dict(value)
        try:
            if isinstance(fields.get("address"), str):
                fields["address"] = Bytes20(fields["address"])
            if isinstance(fields.get("signature"), str):
                fields["signature"] = Bytes65(fields["signature"])
            return cls.model_validate(fields)
        except (ValidationError, ValueError) as e:
            raise DecodeError(cls.__name__, str(e)) from e


class ContractContext(StrictBaseModel):
    """One contract invocation covered by an authorization request."""

    contract: str
    """Address of the invoked contract."""

    fn_name: str
    """Name of the invoked function."""

    args: tuple[Any, ...] = ()
    """Invocation arguments, opaque to this account."""
