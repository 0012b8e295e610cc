"""Tests for the in-memory ledger transfer adapter."""

import pytest

from cpamm.adapters import AssetTransferAdapter, InMemoryLedger, pull_all
from cpamm.constants import DEFAULT_CUSTODY_ADDRESS
from cpamm.errors import InsufficientAllowance, InsufficientAmounts, InsufficientBalance
from tests.helpers import ALICE, BOB, TKA, TKB

CUSTODY = DEFAULT_CUSTODY_ADDRESS


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger(custody=CUSTODY)


class TestInMemoryLedger:
    def test_satisfies_protocol(self, ledger):
        assert isinstance(ledger, AssetTransferAdapter)

    def test_mint_and_balance(self, ledger):
        ledger.mint(TKA, ALICE, 100)
        ledger.mint(TKA, ALICE, 50)
        assert ledger.balance_of(TKA, ALICE) == 150
        assert ledger.balance_of(TKB, ALICE) == 0

    def test_approve_sets_allowance(self, ledger):
        ledger.approve(TKA, ALICE, 100)
        ledger.approve(TKA, ALICE, 30)
        assert ledger.allowance(TKA, ALICE) == 30
        assert ledger.allowance(TKA, ALICE, spender=CUSTODY) == 30
        assert ledger.allowance(TKA, ALICE, spender=BOB) == 0

    def test_pull_moves_to_custody_and_spends_allowance(self, ledger):
        ledger.mint(TKA, ALICE, 100)
        ledger.approve(TKA, ALICE, 80)
        ledger.pull(TKA, ALICE, 60)
        assert ledger.balance_of(TKA, ALICE) == 40
        assert ledger.balance_of(TKA, CUSTODY) == 60
        assert ledger.allowance(TKA, ALICE) == 20

    def test_pull_without_allowance_raises(self, ledger):
        ledger.mint(TKA, ALICE, 100)
        ledger.approve(TKA, ALICE, 10)
        with pytest.raises(InsufficientAllowance):
            ledger.pull(TKA, ALICE, 11)
        assert ledger.balance_of(TKA, ALICE) == 100

    def test_pull_without_balance_raises(self, ledger):
        ledger.mint(TKA, ALICE, 5)
        ledger.approve(TKA, ALICE, 100)
        with pytest.raises(InsufficientBalance):
            ledger.pull(TKA, ALICE, 6)
        assert ledger.allowance(TKA, ALICE) == 100

    def test_push_from_custody(self, ledger):
        ledger.mint(TKA, CUSTODY, 100)
        ledger.push(TKA, BOB, 40)
        assert ledger.balance_of(TKA, BOB) == 40
        assert ledger.balance_of(TKA, CUSTODY) == 60

    def test_custody_cannot_pull_from_itself(self, ledger):
        ledger.mint(TKA, CUSTODY, 100)
        ledger.approve(TKA, CUSTODY, 100)
        with pytest.raises(InsufficientAllowance):
            ledger.pull(TKA, CUSTODY.upper().replace("0X", "0x"), 50)
        assert ledger.balance_of(TKA, CUSTODY) == 100
        assert ledger.allowance(TKA, CUSTODY) == 100

    def test_push_beyond_custody_raises(self, ledger):
        with pytest.raises(InsufficientBalance):
            ledger.push(TKA, BOB, 1)

    def test_negative_amounts_rejected(self, ledger):
        with pytest.raises(InsufficientAmounts):
            ledger.mint(TKA, ALICE, -1)
        with pytest.raises(InsufficientAmounts):
            ledger.approve(TKA, ALICE, -1)

    def test_addresses_are_case_insensitive(self, ledger):
        ledger.mint(TKA.upper().replace("0X", "0x"), ALICE, 7)
        assert ledger.balance_of(TKA, ALICE.upper().replace("0X", "0x")) == 7


class TestPullAll:
    def test_pulls_every_leg(self, ledger):
        for asset in (TKA, TKB):
            ledger.mint(asset, ALICE, 100)
            ledger.approve(asset, ALICE, 100)
        pull_all(ledger, ALICE, [(TKA, 10), (TKB, 20)])
        assert ledger.balance_of(TKA, CUSTODY) == 10
        assert ledger.balance_of(TKB, CUSTODY) == 20

    def test_failed_leg_returns_earlier_legs(self, ledger):
        ledger.mint(TKA, ALICE, 100)
        ledger.approve(TKA, ALICE, 100)
        ledger.mint(TKB, ALICE, 100)  # no allowance for TKB

        with pytest.raises(InsufficientAllowance):
            pull_all(ledger, ALICE, [(TKA, 10), (TKB, 20)])

        assert ledger.balance_of(TKA, ALICE) == 100
        assert ledger.balance_of(TKB, ALICE) == 100
        assert ledger.balance_of(TKA, CUSTODY) == 0
