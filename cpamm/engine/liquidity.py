"""Liquidity engine: pool seeding, deposits and withdrawals.

Deposits only consume the ratio-consistent part of the desired amounts:
the binding side is taken in full and the other side is cut down to match
the current reserve ratio. The excess is never pulled from the provider,
so the pool price does not move when liquidity is added.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from cpamm.adapters.transfers import pull_all
from cpamm.engine.base import Engine, require_positive
from cpamm.errors import InsufficientLiquidity
from cpamm.models.events import LiquidityAdded, LiquidityRemoved, PoolCreated
from cpamm.models.pool import Pool
from cpamm.models.types import normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class LiquidityQuote:
    """Amounts of each asset and shares involved in a deposit or withdrawal."""

    amount0: int
    amount1: int
    shares: int


class LiquidityEngine(Engine):
    """Proportional share accounting against pools in a PoolStore."""

    def create_pool(
        self,
        asset_a: str,
        asset_b: str,
        amount_a: int,
        amount_b: int,
        *,
        sender: str,
        fee_bps: int,
    ) -> str:
        """Create the pool for a pair and seed it with the first deposit.

        amount_a is the deposit of asset_a and amount_b of asset_b, in
        whichever order the caller names the assets.

        Returns:
            The new pool identifier

        Raises:
            InsufficientAmounts: If either amount is zero
            InvalidToken: If an address is malformed
            IdenticalAssets: If both assets are the same
            PoolExists: If the pair already has a pool
            InsufficientLiquidity: If the deposit mints no shares
            InsufficientAllowance, InsufficientBalance: From the transfer adapter
        """
        require_positive(amount_a, "amount0")
        require_positive(amount_b, "amount1")
        provider = normalize_address(sender)

        pool = self.store.open_pool(asset_a, asset_b, fee_bps)
        if normalize_address(asset_a) == pool.asset0:
            amount0, amount1 = amount_a, amount_b
        else:
            amount0, amount1 = amount_b, amount_a

        shares = self.math.initial_shares(amount0, amount1)
        if shares == 0:
            raise InsufficientLiquidity(f"Initial deposit {amount0}/{amount1} mints no shares")

        pull_all(self.transfers, provider, [(pool.asset0, amount0), (pool.asset1, amount1)])

        pool.reserve0 = amount0
        pool.reserve1 = amount1
        pool.total_shares = shares
        pool.share_balances[provider] = shares
        self.store.commit(pool)

        logger.info(
            "pool_created",
            pool_id=pool.id,
            asset0=pool.asset0,
            asset1=pool.asset1,
            reserve0=amount0,
            reserve1=amount1,
            shares=shares,
        )
        self._emit(PoolCreated(pool_id=pool.id, asset0=pool.asset0, asset1=pool.asset1))
        self._emit(
            LiquidityAdded(
                pool_id=pool.id,
                provider=provider,
                amount0=amount0,
                amount1=amount1,
                shares_minted=shares,
            )
        )
        return pool.id

    def preview_add_liquidity(
        self,
        pool_id: str,
        amount0_desired: int,
        amount1_desired: int,
    ) -> LiquidityQuote:
        """Work out what add_liquidity would consume and mint, without doing it.

        Raises:
            PoolNotFound: If the pool does not exist
            InsufficientAmounts: If either desired amount is zero
        """
        require_positive(amount0_desired, "amount0")
        require_positive(amount1_desired, "amount1")
        return self._deposit(self.store.get(pool_id), amount0_desired, amount1_desired)

    def add_liquidity(
        self,
        pool_id: str,
        amount0_desired: int,
        amount1_desired: int,
        *,
        sender: str,
    ) -> int:
        """Deposit both assets at the pool ratio and mint shares to sender.

        Returns:
            Shares minted

        Raises:
            PoolNotFound: If the pool does not exist
            InsufficientAmounts: If either desired amount is zero
            InsufficientLiquidity: If the deposit is too small to mint a share
            InsufficientAllowance, InsufficientBalance: From the transfer adapter
        """
        pool = self.store.get(pool_id)
        require_positive(amount0_desired, "amount0")
        require_positive(amount1_desired, "amount1")
        provider = normalize_address(sender)

        deposit = self._deposit(pool, amount0_desired, amount1_desired)
        if deposit.shares == 0:
            raise InsufficientLiquidity(
                f"Deposit {amount0_desired}/{amount1_desired} mints no shares in pool {pool.id}"
            )

        pull_all(
            self.transfers,
            provider,
            [(pool.asset0, deposit.amount0), (pool.asset1, deposit.amount1)],
        )

        pool.reserve0 += deposit.amount0
        pool.reserve1 += deposit.amount1
        pool.total_shares += deposit.shares
        pool.share_balances[provider] = pool.share_balances.get(provider, 0) + deposit.shares

        logger.debug(
            "liquidity_added",
            pool_id=pool.id[-8:],
            provider=provider[-8:],
            amount0=deposit.amount0,
            amount1=deposit.amount1,
            refunded0=amount0_desired - deposit.amount0,
            refunded1=amount1_desired - deposit.amount1,
            shares=deposit.shares,
        )
        self._emit(
            LiquidityAdded(
                pool_id=pool.id,
                provider=provider,
                amount0=deposit.amount0,
                amount1=deposit.amount1,
                shares_minted=deposit.shares,
            )
        )
        return deposit.shares

    def preview_remove_liquidity(self, pool_id: str, share_amount: int) -> LiquidityQuote:
        """Work out what burning share_amount would pay out, without doing it.

        Raises:
            PoolNotFound: If the pool does not exist
            InsufficientAmounts: If share_amount is zero
            InsufficientLiquidity: If share_amount is not below the outstanding shares
        """
        pool = self.store.get(pool_id)
        require_positive(share_amount, "share_amount")
        self._require_shares_left(pool, share_amount)
        return self._withdrawal(pool, share_amount)

    def remove_liquidity(self, pool_id: str, share_amount: int, *, sender: str) -> tuple[int, int]:
        """Burn sender's shares and pay out the pro-rata reserves.

        Returns:
            (amount0_out, amount1_out)

        Raises:
            PoolNotFound: If the pool does not exist
            InsufficientAmounts: If share_amount is zero
            InsufficientLiquidity: If sender holds fewer shares than share_amount,
                the burn would retire every outstanding share, or the shares are
                worth nothing
        """
        pool = self.store.get(pool_id)
        require_positive(share_amount, "share_amount")
        provider = normalize_address(sender)

        held = pool.share_balances.get(provider, 0)
        if share_amount > held:
            raise InsufficientLiquidity(
                f"{provider} holds {held} shares of pool {pool.id}, cannot burn {share_amount}"
            )
        self._require_shares_left(pool, share_amount)

        withdrawal = self._withdrawal(pool, share_amount)
        if withdrawal.amount0 == 0 and withdrawal.amount1 == 0:
            raise InsufficientLiquidity(f"Burning {share_amount} shares of pool {pool.id} pays nothing")

        for asset, amount in ((pool.asset0, withdrawal.amount0), (pool.asset1, withdrawal.amount1)):
            if amount > 0:
                try:
                    self.transfers.push(asset, provider, amount)
                except Exception:
                    # Custody should always cover the reserves
                    logger.error(
                        "custody_shortfall",
                        pool_id=pool.id,
                        asset=asset,
                        amount=amount,
                        reserve0=pool.reserve0,
                        reserve1=pool.reserve1,
                    )
                    raise

        pool.reserve0 -= withdrawal.amount0
        pool.reserve1 -= withdrawal.amount1
        pool.total_shares -= share_amount
        remaining = held - share_amount
        if remaining:
            pool.share_balances[provider] = remaining
        else:
            del pool.share_balances[provider]

        self._emit(
            LiquidityRemoved(
                pool_id=pool.id,
                provider=provider,
                amount0=withdrawal.amount0,
                amount1=withdrawal.amount1,
                shares_burned=share_amount,
            )
        )
        return withdrawal.amount0, withdrawal.amount1

    def _deposit(self, pool: Pool, amount0_desired: int, amount1_desired: int) -> LiquidityQuote:
        amount0, amount1 = self.math.optimal_deposit(
            amount0_desired, amount1_desired, pool.reserve0, pool.reserve1
        )
        shares = self.math.shares_for_deposit(
            amount0, amount1, pool.reserve0, pool.reserve1, pool.total_shares
        )
        return LiquidityQuote(amount0=amount0, amount1=amount1, shares=shares)

    def _require_shares_left(self, pool: Pool, share_amount: int) -> None:
        # Reserves and total_shares stay positive for the life of a pool
        if share_amount >= pool.total_shares:
            raise InsufficientLiquidity(
                f"Burning {share_amount} of {pool.total_shares} shares would empty pool {pool.id}"
            )

    def _withdrawal(self, pool: Pool, share_amount: int) -> LiquidityQuote:
        amount0, amount1 = self.math.amounts_for_shares(
            share_amount, pool.reserve0, pool.reserve1, pool.total_shares
        )
        return LiquidityQuote(amount0=amount0, amount1=amount1, shares=share_amount)


__all__ = ["LiquidityEngine", "LiquidityQuote"]
