"""Pytest configuration and fixtures."""

import pytest

from cpamm.adapters.notifications import RecordingSink
from cpamm.adapters.transfers import InMemoryLedger
from cpamm.core import AMM
from tests.helpers import DEPLOYER, E18, TKA, TKB, fund, make_amm, seed_pool
from tests.helpers.mocks import OverpayingMath


@pytest.fixture
def amm_parts() -> tuple[AMM, InMemoryLedger, RecordingSink]:
    """A fresh 30 bps AMM with its ledger and recording sink."""
    return make_amm()


@pytest.fixture
def amm(amm_parts) -> AMM:
    return amm_parts[0]


@pytest.fixture
def ledger(amm_parts) -> InMemoryLedger:
    return amm_parts[1]


@pytest.fixture
def sink(amm_parts) -> RecordingSink:
    return amm_parts[2]


@pytest.fixture
def small_pool(amm: AMM, ledger: InMemoryLedger) -> str:
    """TKA/TKB pool with reserves 1000/4000 and 2000 shares held by DEPLOYER."""
    return seed_pool(amm, ledger, 1000, 4000)


@pytest.fixture
def large_pool(amm: AMM, ledger: InMemoryLedger) -> str:
    """TKA/TKB pool with reserves 1000e18/2000e18, DEPLOYER funded for more."""
    fund(ledger, DEPLOYER, TKA, TKB)
    return amm.create_pool(TKA, TKB, 1_000 * E18, 2_000 * E18, sender=DEPLOYER)


@pytest.fixture
def overpaying_math() -> OverpayingMath:
    return OverpayingMath()
