"""
Shared pytest fixtures for all omniwallet tests.

Provides a fresh in-memory host and an account deployed on it.
"""

from __future__ import annotations

import pytest

from omniwallet.account import AccountContract
from omniwallet.host import Env, Ledger
from tests.omniwallet.helpers import ALICE_ADDRESS


@pytest.fixture
def ledger() -> Ledger:
    """Ledger clock at sequence 0 with the local network limits."""
    return Ledger()


@pytest.fixture
def env(ledger: Ledger) -> Env:
    """In-memory host with a deployed contract."""
    return Env.in_memory(ledger, contract_address="CTESTACCOUNT")


@pytest.fixture
def contract(env: Env) -> AccountContract:
    """Account contract that has not been initialized yet."""
    return AccountContract(env)


@pytest.fixture
def alice_account(contract: AccountContract) -> AccountContract:
    """Account controlled by Alice's address."""
    contract.initialize(ALICE_ADDRESS)
    return contract
