"""
Host environment for the account contract.

Capability protocols plus in-memory and SQLite reference implementations.
"""

from .env import Env, HostCrypto, generate_contract_address
from .exceptions import HostError, ReentrancyError, StorageError, TtlError
from .interfaces import CryptoHost, Deployer, LeaseKind, Storage
from .ledger import InMemoryDeployer, InMemoryStorage, Ledger
from .sqlite import SQLiteDeployer, SQLiteStorage

__all__ = [
    "CryptoHost",
    "Deployer",
    "Env",
    "HostCrypto",
    "HostError",
    "InMemoryDeployer",
    "InMemoryStorage",
    "LeaseKind",
    "Ledger",
    "ReentrancyError",
    "SQLiteDeployer",
    "SQLiteStorage",
    "Storage",
    "StorageError",
    "TtlError",
    "generate_contract_address",
]
