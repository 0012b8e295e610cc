"""Tests for fee-bearing exact-input swaps."""

import pytest
from structlog.testing import capture_logs

from cpamm.engine import SwapQuote
from cpamm.errors import (
    AmmError,
    InsufficientAllowance,
    InsufficientAmounts,
    InsufficientBalance,
    InsufficientLiquidity,
    InvalidToken,
    InvariantViolation,
    PoolNotFound,
    SlippageExceeded,
)
from cpamm.models import Swap
from tests.helpers import ALICE, BOB, DEFAULT_FUNDING, TKA, TKB, TKC, fund, make_amm, seed_pool
from tests.helpers.mocks import BrokenPushLedger

UNKNOWN_POOL = "0x" + "00" * 32


@pytest.fixture
def trader(ledger):
    fund(ledger, ALICE, TKA, TKB)
    return ALICE


class TestSwap:
    """Tests for successful swaps."""

    def test_asset0_in(self, amm, ledger, small_pool, trader):
        """99 after fee; 99 * 4000 // 1099 = 360."""
        assert amm.swap(small_pool, TKA, 100, 0, trader, sender=trader) == 360
        assert amm.get_pool(small_pool) == (TKA, TKB, 1100, 3640, 30, 2000)
        assert ledger.balance_of(TKA, trader) == DEFAULT_FUNDING - 100
        assert ledger.balance_of(TKB, trader) == DEFAULT_FUNDING + 360

    def test_asset1_in(self, amm, small_pool, trader):
        """398 after fee; 398 * 1000 // 4398 = 90."""
        assert amm.swap(small_pool, TKB, 400, 0, trader, sender=trader) == 90
        state = amm.get_pool(small_pool)
        assert (state.reserve0, state.reserve1) == (910, 4400)

    def test_without_fee(self):
        amm, ledger, _ = make_amm(fee_bps=0)
        pool_id = seed_pool(amm, ledger, 1000, 4000)
        fund(ledger, ALICE, TKA)
        assert amm.swap(pool_id, TKA, 100, 0, ALICE, sender=ALICE) == 363
        assert amm.get_pool(pool_id).reserve1 == 3637

    def test_fee_stays_in_pool(self, amm, small_pool, trader):
        k_before = 1000 * 4000
        amm.swap(small_pool, TKA, 100, 0, trader, sender=trader)
        state = amm.get_pool(small_pool)
        assert state.reserve0 * state.reserve1 == 4_004_000
        assert state.reserve0 * state.reserve1 > k_before

    def test_output_goes_to_recipient(self, amm, ledger, small_pool, trader):
        amm.swap(small_pool, TKA, 100, 0, BOB, sender=trader)
        assert ledger.balance_of(TKB, BOB) == 360
        assert ledger.balance_of(TKB, trader) == DEFAULT_FUNDING

    def test_min_amount_out_met_exactly(self, amm, small_pool, trader):
        assert amm.swap(small_pool, TKA, 100, 360, trader, sender=trader) == 360

    def test_emits_swap(self, amm, sink, small_pool, trader):
        sink.clear()
        amm.swap(small_pool, TKA, 100, 0, BOB, sender=trader)
        assert sink.events == [
            Swap(
                pool_id=small_pool,
                sender=trader,
                recipient=BOB,
                asset_in=TKA,
                amount_in=100,
                asset_out=TKB,
                amount_out=360,
            )
        ]

    def test_reserve_product_grows_over_many_swaps(self, amm, small_pool, trader):
        k = 1000 * 4000
        for asset_in, amount in [(TKA, 50), (TKB, 700), (TKA, 3), (TKB, 1234), (TKA, 999)]:
            amm.swap(small_pool, asset_in, amount, 0, trader, sender=trader)
            state = amm.get_pool(small_pool)
            assert state.reserve0 * state.reserve1 >= k
            k = state.reserve0 * state.reserve1


class TestSwapRejections:
    """Tests for swaps that must leave everything unchanged."""

    def test_slippage(self, amm, ledger, sink, small_pool, trader):
        sink.clear()
        with pytest.raises(SlippageExceeded):
            amm.swap(small_pool, TKA, 100, 361, trader, sender=trader)
        assert amm.get_pool(small_pool) == (TKA, TKB, 1000, 4000, 30, 2000)
        assert ledger.balance_of(TKA, trader) == DEFAULT_FUNDING
        assert sink.events == []

    def test_zero_amount(self, amm, small_pool, trader):
        with pytest.raises(InsufficientAmounts):
            amm.swap(small_pool, TKA, 0, 0, trader, sender=trader)

    def test_negative_min_amount_out(self, amm, small_pool, trader):
        with pytest.raises(InsufficientAmounts):
            amm.swap(small_pool, TKA, 100, -1, trader, sender=trader)

    def test_foreign_asset(self, amm, small_pool, trader):
        with pytest.raises(InvalidToken):
            amm.swap(small_pool, TKC, 100, 0, trader, sender=trader)

    def test_output_rounds_to_zero(self, amm, small_pool, trader):
        with pytest.raises(InsufficientLiquidity):
            amm.swap(small_pool, TKA, 1, 0, trader, sender=trader)
        assert amm.get_pool(small_pool) == (TKA, TKB, 1000, 4000, 30, 2000)

    def test_zero_output_below_minimum_is_slippage(self, amm, ledger, small_pool, trader):
        """A positive minimum is checked before the zero-output rule."""
        with pytest.raises(SlippageExceeded):
            amm.swap(small_pool, TKA, 1, 1, trader, sender=trader)
        assert amm.get_pool(small_pool) == (TKA, TKB, 1000, 4000, 30, 2000)
        assert ledger.balance_of(TKA, trader) == DEFAULT_FUNDING

    def test_unknown_pool(self, amm, trader):
        with pytest.raises(PoolNotFound):
            amm.swap(UNKNOWN_POOL, TKA, 100, 0, trader, sender=trader)

    def test_unfunded_sender(self, amm, ledger, small_pool):
        with pytest.raises(InsufficientAllowance):
            amm.swap(small_pool, TKA, 100, 0, BOB, sender=BOB)
        assert amm.get_pool(small_pool).reserve0 == 1000
        assert ledger.balance_of(TKB, BOB) == 0

    def test_custody_cannot_be_sender(self, amm, ledger, small_pool):
        fund(ledger, ledger.custody, TKA)
        with pytest.raises(InsufficientAllowance):
            amm.swap(small_pool, TKA, 100, 0, BOB, sender=ledger.custody)
        assert amm.get_pool(small_pool) == (TKA, TKB, 1000, 4000, 30, 2000)
        assert ledger.balance_of(TKB, BOB) == 0

    def test_failed_push_refunds_input(self, amm, ledger, small_pool, trader):
        amm.swaps.transfers = BrokenPushLedger(ledger, failing_asset=TKB)
        with pytest.raises(InsufficientBalance):
            amm.swap(small_pool, TKA, 100, 0, trader, sender=trader)
        assert ledger.balance_of(TKA, trader) == DEFAULT_FUNDING
        assert ledger.balance_of(TKA, ledger.custody) == 1000
        assert amm.get_pool(small_pool).reserve0 == 1000


class TestQuote:
    def test_quote_matches_swap(self, amm, small_pool, trader):
        quote = amm.quote_swap(small_pool, TKA, 100)
        assert quote == SwapQuote(
            pool_id=small_pool,
            asset_in=TKA,
            asset_out=TKB,
            amount_in=100,
            amount_out=360,
            reserve_in_after=1100,
            reserve_out_after=3640,
        )
        assert amm.get_pool(small_pool).reserve0 == 1000
        assert amm.swap(small_pool, TKA, 100, 0, trader, sender=trader) == quote.amount_out

    def test_quote_rejects_foreign_asset(self, amm, small_pool):
        with pytest.raises(InvalidToken):
            amm.quote_swap(small_pool, TKC, 100)


class TestInvariantCheck:
    """Tests for the post-swap reserve product check."""

    def test_defective_math_is_refused(self, amm, ledger, sink, small_pool, trader, overpaying_math):
        amm.swaps.math = overpaying_math
        sink.clear()

        with capture_logs() as logs:
            with pytest.raises(InvariantViolation) as exc_info:
                amm.swap(small_pool, TKA, 1, 0, trader, sender=trader)

        assert exc_info.value.k_before == 4_000_000
        assert exc_info.value.k_after == 1001 * 2000
        assert not isinstance(exc_info.value, AmmError)
        assert amm.get_pool(small_pool) == (TKA, TKB, 1000, 4000, 30, 2000)
        assert ledger.balance_of(TKB, trader) == DEFAULT_FUNDING
        assert sink.events == []
        assert any(
            log["event"] == "invariant_violation" and log["log_level"] == "critical" for log in logs
        )
