"""Swap engine: fee-bearing exact-input exchanges.

Formula: amount_out = (in_after_fee * reserve_out) / (reserve_in + in_after_fee)
where in_after_fee = amount_in * (10000 - fee_bps) / 10000, both floored.

The whole amount_in is credited to the input reserve, so the fee stays in
the pool and the reserve product can only grow.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from cpamm.engine.base import Engine, require_non_negative, require_positive
from cpamm.errors import InsufficientLiquidity, InvariantViolation, SlippageExceeded
from cpamm.models.events import Swap
from cpamm.models.pool import Pool
from cpamm.models.types import normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapQuote:
    """Result of pricing a swap against a pool's current reserves."""

    pool_id: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int
    # Reserves the pool would hold after the swap
    reserve_in_after: int
    reserve_out_after: int


class SwapEngine(Engine):
    """Constant-product swaps against pools in a PoolStore."""

    def quote(self, pool_id: str, asset_in: str, amount_in: int) -> SwapQuote:
        """Price an exact-input swap without executing it.

        Raises:
            PoolNotFound: If the pool does not exist
            InvalidToken: If asset_in is not one of the pool's assets
            InsufficientAmounts: If amount_in is zero
        """
        pool = self.store.get(pool_id)
        return self._quote(pool, asset_in, amount_in)

    def swap(
        self,
        pool_id: str,
        asset_in: str,
        amount_in: int,
        min_amount_out: int,
        recipient: str,
        *,
        sender: str,
    ) -> int:
        """Sell amount_in of asset_in for the pool's other asset.

        Returns:
            Amount of the other asset delivered to recipient

        Raises:
            PoolNotFound: If the pool does not exist
            InvalidToken: If asset_in is not one of the pool's assets
            InsufficientAmounts: If amount_in is zero
            SlippageExceeded: If the output is below min_amount_out
            InsufficientLiquidity: If the swap would pay out nothing and
                min_amount_out is zero
            InsufficientAllowance, InsufficientBalance: From the transfer adapter
            InvariantViolation: If the reserve product would decrease (fatal)
        """
        pool = self.store.get(pool_id)
        quote = self._quote(pool, asset_in, amount_in)
        require_non_negative(min_amount_out, "min_amount_out")
        trader = normalize_address(sender)
        to = normalize_address(recipient)

        if quote.amount_out < min_amount_out:
            logger.info(
                "swap_slippage_exceeded",
                pool_id=pool.id[-8:],
                amount_out=quote.amount_out,
                min_amount_out=min_amount_out,
            )
            raise SlippageExceeded(
                f"Swap output {quote.amount_out} is below minimum {min_amount_out}"
            )
        if quote.amount_out == 0:
            raise InsufficientLiquidity(
                f"Swapping {amount_in} of {quote.asset_in} in pool {pool.id} pays nothing"
            )

        self._check_invariant(pool, quote)

        self.transfers.pull(quote.asset_in, trader, quote.amount_in)
        try:
            self.transfers.push(quote.asset_out, to, quote.amount_out)
        except Exception:
            logger.error(
                "custody_shortfall",
                pool_id=pool.id,
                asset=quote.asset_out,
                amount=quote.amount_out,
            )
            self.transfers.push(quote.asset_in, trader, quote.amount_in)
            raise

        if quote.asset_in == pool.asset0:
            pool.reserve0 = quote.reserve_in_after
            pool.reserve1 = quote.reserve_out_after
        else:
            pool.reserve1 = quote.reserve_in_after
            pool.reserve0 = quote.reserve_out_after

        logger.debug(
            "swap_executed",
            pool_id=pool.id[-8:],
            asset_in=quote.asset_in[-8:],
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
        )
        self._emit(
            Swap(
                pool_id=pool.id,
                sender=trader,
                recipient=to,
                asset_in=quote.asset_in,
                amount_in=quote.amount_in,
                asset_out=quote.asset_out,
                amount_out=quote.amount_out,
            )
        )
        return quote.amount_out

    def _quote(self, pool: Pool, asset_in: str, amount_in: int) -> SwapQuote:
        reserve_in, reserve_out = pool.get_reserves(asset_in)
        asset_out = pool.get_asset_out(asset_in)
        require_positive(amount_in, "amount_in")

        amount_out = self.math.get_amount_out(amount_in, reserve_in, reserve_out, pool.fee_bps)
        return SwapQuote(
            pool_id=pool.id,
            asset_in=normalize_address(asset_in),
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=amount_out,
            reserve_in_after=reserve_in + amount_in,
            reserve_out_after=reserve_out - amount_out,
        )

    def _check_invariant(self, pool: Pool, quote: SwapQuote) -> None:
        """Refuse to commit a swap that would shrink the reserve product."""
        k_before = pool.k
        k_after = quote.reserve_in_after * quote.reserve_out_after
        if k_after < k_before:
            logger.critical(
                "invariant_violation",
                pool_id=pool.id,
                k_before=k_before,
                k_after=k_after,
                fee_bps=pool.fee_bps,
                amount_in=quote.amount_in,
                amount_out=quote.amount_out,
            )
            raise InvariantViolation(pool.id, k_before, k_after)


__all__ = ["SwapEngine", "SwapQuote"]
