"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Asset and account addresses, common amounts
- factories: AMM, funding and pool seeding helpers
"""

from tests.helpers.constants import ALICE, BOB, DEPLOYER, E18, FEE_BPS, TKA, TKB, TKC
from tests.helpers.factories import DEFAULT_FUNDING, fund, make_amm, seed_pool

__all__ = [
    # Constants
    "TKA",
    "TKB",
    "TKC",
    "DEPLOYER",
    "ALICE",
    "BOB",
    "E18",
    "FEE_BPS",
    # Factories
    "DEFAULT_FUNDING",
    "make_amm",
    "fund",
    "seed_pool",
]
