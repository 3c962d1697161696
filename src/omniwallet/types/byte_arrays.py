"""
Fixed-length byte array types.

Every value that crosses the account boundary has a fixed width:

- Bytes20: an Ethereum address (the account identity).
- Bytes32: a payload hash, a keccak digest, or a private key scalar.
- Bytes64: an ECDSA signature without its recovery selector (r || s).
- Bytes65: a recoverable signature (r || s || v) or an uncompressed public key.

Construction is the decode step: a value of the wrong length raises
`LengthError` instead of being truncated or padded.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, Mapping, SupportsIndex

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .exceptions import DecodeError, LengthError


def _coerce_to_bytes(value: Any, type_name: str) -> bytes:
    """
    Coerce a variety of inputs to raw bytes.

    Accepts:
      - `bytes` / `bytearray` / `memoryview` (returned as immutable `bytes`)
      - Iterables of integers in [0, 255]
      - Hex strings, with or without a '0x' prefix (e.g. "0xdeadbeef" or "deadbeef")

    Raises:
      DecodeError: If the value is not one of the above, or a string is not valid hex.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return bytes.fromhex(value.removeprefix("0x"))
        except ValueError as e:
            raise DecodeError(type_name, f"invalid hex string: {e}") from e
    if isinstance(value, Iterable) and not isinstance(value, Mapping):
        try:
            # bytes(bytearray(iterable)) enforces each element is an int in 0..255
            return bytes(bytearray(value))
        except (TypeError, ValueError) as e:
            raise DecodeError(type_name, f"not a sequence of byte values: {e}") from e
    # Scalars are rejected, never widened into zero bytes.
    raise DecodeError(type_name, f"expected bytes or a hex string, got {type(value).__name__}")


class BaseBytes(bytes):
    """
    A base class for fixed-length byte types that inherits from `bytes`.

    Subclasses set:
      - `LENGTH`: exact number of bytes the instance must contain.

    Instances are immutable byte objects with strict length checking.
    """

    LENGTH: ClassVar[int]
    """The exact number of bytes (overridden by subclasses)."""

    def __new__(cls, value: Any = b"") -> Self:
        """
        Create and validate a new Bytes instance.

        Args:
            value: Any value coercible to bytes (see `_coerce_to_bytes`).

        Raises:
            DecodeError: If `value` cannot be read as bytes.
            LengthError: If the resulting byte length differs from `LENGTH`.
        """
        if not hasattr(cls, "LENGTH"):
            raise TypeError(f"{cls.__name__} must define LENGTH")

        b = _coerce_to_bytes(value, cls.__name__)
        if len(b) != cls.LENGTH:
            raise LengthError(cls.__name__, expected=cls.LENGTH, actual=len(b))
        return super().__new__(cls, b)

    @classmethod
    def zero(cls) -> Self:
        """
        Create a new instance filled with zero bytes.

        Returns:
            A new instance of this class, zero-initialized.
        """
        return cls(b"\x00" * cls.LENGTH)

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """
        Parse `data` as a value of this type.

        Unlike the constructor, only raw bytes are accepted here.
        This is the entry point for values read back from storage.
        """
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"{cls.__name__}.decode_bytes expects bytes, got {type(data).__name__}")
        if len(data) != cls.LENGTH:
            raise LengthError(cls.__name__, expected=cls.LENGTH, actual=len(data))
        return cls(data)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Hook into Pydantic's validation system.

        This schema defines how to handle the custom Bytes type:
        1. If the input is already an instance of the class, accept it.
        2. Otherwise, validate and coerce the input to the exact LENGTH
            and then instantiate the class.
        3. For serialization (e.g., to JSON), convert to hex string.
        """
        # Validator that takes any bytes-like input and returns an instance of the class.
        from_bytes_validator = core_schema.no_info_plain_validator_function(cls)

        # Schema that validates bytes with exact length, then calls our validator.
        python_schema = core_schema.chain_schema(
            [
                core_schema.bytes_schema(min_length=cls.LENGTH, max_length=cls.LENGTH),
                from_bytes_validator,
            ]
        )

        return core_schema.union_schema(
            [
                # Case 1: The value is already the correct type.
                core_schema.is_instance_schema(cls),
                # Case 2: The value needs to be parsed and validated.
                python_schema,
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda x: x.hex(), when_used="json"
            ),
        )

    def __repr__(self) -> str:
        """Return a string representation of the bytes."""
        tname = type(self).__name__
        return f"{tname}({self.hex()})"

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return hash((type(self), bytes(self)))

    def hex(self, sep: str | bytes | None = None, bytes_per_sep: SupportsIndex = 1) -> str:
        """Return the hexadecimal string representation of the underlying bytes."""
        return bytes(self).hex() if sep is None else bytes(self).hex(sep, bytes_per_sep)


class Bytes20(BaseBytes):
    """Fixed-size byte array of exactly 20 bytes (an Ethereum address)."""

    LENGTH = 20


class Bytes32(BaseBytes):
    """Fixed-size byte array of exactly 32 bytes."""

    LENGTH = 32


class Bytes64(BaseBytes):
    """Fixed-size byte array of exactly 64 bytes."""

    LENGTH = 64


class Bytes65(BaseBytes):
    """Fixed-size byte array of exactly 65 bytes."""

    LENGTH = 65
