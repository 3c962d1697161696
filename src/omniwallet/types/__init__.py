"""Reusable type definitions for the account contract."""

from .base import CamelModel, StrictBaseModel
from .byte_arrays import BaseBytes, Bytes20, Bytes32, Bytes64, Bytes65
from .exceptions import DecodeError, LengthError, OmniwalletError

__all__ = [
    # Core types
    "BaseBytes",
    "Bytes20",
    "Bytes32",
    "Bytes64",
    "Bytes65",
    "CamelModel",
    "StrictBaseModel",
    # Exceptions
    "OmniwalletError",
    "DecodeError",
    "LengthError",
]
