"""
Global configuration for the account contract.

This module contains environment-specific settings that apply across all modules.
"""

import os
from typing import Final

from omniwallet.types import StrictBaseModel

_SUPPORTED_NETWORKS: list[str] = ["mainnet", "testnet", "local"]

OMNIWALLET_NETWORK = os.environ.get("OMNIWALLET_NETWORK", "testnet").lower()
"""The network whose ledger limits apply ('mainnet', 'testnet' or 'local'). Defaults to 'testnet'."""

if OMNIWALLET_NETWORK not in _SUPPORTED_NETWORKS:
    raise ValueError(
        f"Invalid OMNIWALLET_NETWORK environment variable: '{OMNIWALLET_NETWORK}'. "
        f"Supported values: {_SUPPORTED_NETWORKS}"
    )


class LedgerConfig(StrictBaseModel):
    """Lease limits of a ledger, expressed in ledgers."""

    max_entry_ttl: int
    """Largest TTL any entry can be extended to."""

    min_persistent_ttl: int
    """TTL given to a persistent entry when it is first written."""


LEDGER_PRESETS: Final[dict[str, LedgerConfig]] = {
    # ~180 days and ~7 days at 5 seconds per ledger.
    "mainnet": LedgerConfig(max_entry_ttl=3_110_400, min_persistent_ttl=120_960),
    "testnet": LedgerConfig(max_entry_ttl=3_110_400, min_persistent_ttl=120_960),
    # Short leases so expiry can be exercised locally.
    "local": LedgerConfig(max_entry_ttl=535_680, min_persistent_ttl=4_096),
}

DEFAULT_LEDGER_CONFIG: Final = LEDGER_PRESETS[OMNIWALLET_NETWORK]
"""Ledger limits of the configured network."""
