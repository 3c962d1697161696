"""Exception hierarchy for the omniwallet package."""

from __future__ import annotations


class OmniwalletError(Exception):
    """
    Base exception for all omniwallet errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class DecodeError(OmniwalletError):
    """
    Raised when a value supplied at a boundary cannot be decoded.

    Attributes:
        type_name: The type being decoded.
        detail: Description of what went wrong.
    """

    def __init__(self, type_name: str, detail: str) -> None:
        self.type_name = type_name
        self.detail = detail
        super().__init__(f"Failed to decode {type_name}: {detail}")


class LengthError(DecodeError, ValueError):
    """
    Raised when a fixed-size byte value has the wrong length.

    Also a `ValueError`, so pydantic validators report it as a validation error.

    Attributes:
        expected: The exact number of bytes required.
        actual: The number of bytes received.
    """

    def __init__(self, type_name: str, *, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(type_name, f"expected exactly {expected} bytes, got {actual}")
