"""Tests for Ethereum address derivation."""

import pytest
from eth_utils import is_checksum_address

from omniwallet.account import derive_identity, format_identity, identity_from_private_key
from omniwallet.crypto.secp256k1 import _Gx, _Gy
from omniwallet.types import Bytes20, Bytes32, Bytes65, DecodeError
from tests.omniwallet.helpers import ALICE_ADDRESS, ALICE_KEY, BOB_ADDRESS, BOB_KEY

GENERATOR_PUBKEY = Bytes65(b"\x04" + _Gx.to_bytes(32, "big") + _Gy.to_bytes(32, "big"))


class TestDeriveIdentity:
    """Tests for derive_identity."""

    def test_generator_address(self):
        """Test the address of the key whose public point is G."""
        assert derive_identity(GENERATOR_PUBKEY) == Bytes20(
            "7e5f4552091a69125d5dfcb7b8c2659029395bdf"
        )

    @pytest.mark.parametrize(
        "private_key,address", [(ALICE_KEY, ALICE_ADDRESS), (BOB_KEY, BOB_ADDRESS)]
    )
    def test_known_accounts(self, private_key: Bytes32, address: Bytes20):
        """Test well-known development accounts."""
        assert identity_from_private_key(private_key) == address

    def test_rejects_non_uncompressed_key(self):
        """Test that a key without the 0x04 marker is rejected."""
        with pytest.raises(DecodeError, match="0x04"):
            derive_identity(Bytes65(b"\x02" + GENERATOR_PUBKEY[1:]))


class TestFormatIdentity:
    """Tests for EIP-55 checksum rendering."""

    @pytest.mark.parametrize(
        "checksummed",
        [
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
            "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
            "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf",
        ],
    )
    def test_checksum(self, checksummed: str):
        """Test the mixed-case form of known addresses."""
        assert format_identity(Bytes20(checksummed.lower())) == checksummed

    def test_output_is_valid_checksum(self):
        """Test that rendered addresses pass the standard checksum validation."""
        rendered = format_identity(derive_identity(GENERATOR_PUBKEY))
        assert is_checksum_address(rendered)
