"""Well-known keys and payloads used as test vectors."""

from __future__ import annotations

from omniwallet.types import Bytes20, Bytes32

# The first two accounts of the default Hardhat / Anvil test mnemonic.
ALICE_KEY = Bytes32("0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80")
ALICE_ADDRESS = Bytes20("0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266")

BOB_KEY = Bytes32("0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d")
BOB_ADDRESS = Bytes20("0x70997970C51812dc3A010C7d01b50e0d17dc79C8")

# sha256 of an authorization preimage, as handed over by the host.
SCENARIO_PAYLOAD = Bytes32("eb5afeca2ffd697329dc3454f38df97b2ce104819a1e523e388a96fb9d41a10d")


def flip_bit(data: bytes, bit: int) -> bytes:
    """Return a copy of `data` with bit number `bit` inverted (bit 0 is the MSB of byte 0)."""
    buf = bytearray(data)
    buf[bit // 8] ^= 0x80 >> (bit % 8)
    return bytes(buf)
