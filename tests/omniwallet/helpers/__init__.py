"""Test helpers shared across omniwallet tests."""

from .keys import (
    ALICE_ADDRESS,
    ALICE_KEY,
    BOB_ADDRESS,
    BOB_KEY,
    SCENARIO_PAYLOAD,
    flip_bit,
)

__all__ = [
    "ALICE_ADDRESS",
    "ALICE_KEY",
    "BOB_ADDRESS",
    "BOB_KEY",
    "SCENARIO_PAYLOAD",
    "flip_bit",
]
