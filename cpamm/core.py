"""Public entry point of the AMM core.

The AMM wires a PoolStore to the liquidity and swap engines and exposes
the operation surface callers use. Each mutating call either completes in
full (transfers done, pool updated, event emitted) or raises before
anything changed. The host is expected to run one mutating call at a time.
"""

from __future__ import annotations

from cpamm.adapters.notifications import LoggingSink, NotificationSink
from cpamm.adapters.transfers import AssetTransferAdapter, InMemoryLedger
from cpamm.config import DEFAULT_AMM_CONFIG, AmmConfig
from cpamm.engine.liquidity import LiquidityEngine, LiquidityQuote
from cpamm.engine.swap import SwapEngine, SwapQuote
from cpamm.models.pool import PoolState
from cpamm.pools.store import PoolStore


class AMM:
    """Multi-pool constant product market maker with a single fixed fee."""

    def __init__(
        self,
        transfers: AssetTransferAdapter,
        sink: NotificationSink | None = None,
        config: AmmConfig = DEFAULT_AMM_CONFIG,
        store: PoolStore | None = None,
    ) -> None:
        """Create an AMM.

        Args:
            transfers: Adapter moving assets into and out of custody
            sink: Receiver of operation events (default: LoggingSink)
            config: Fee and custody settings, fixed for the AMM's lifetime
            store: Pool table to operate on (default: a new empty store)
        """
        self._config = config
        self.store = store if store is not None else PoolStore()
        self.transfers = transfers
        self.sink = sink if sink is not None else LoggingSink()
        self.liquidity = LiquidityEngine(self.store, transfers, self.sink)
        self.swaps = SwapEngine(self.store, transfers, self.sink)

    @classmethod
    def in_memory(
        cls,
        config: AmmConfig = DEFAULT_AMM_CONFIG,
        sink: NotificationSink | None = None,
    ) -> tuple[AMM, InMemoryLedger]:
        """Build an AMM backed by a fresh InMemoryLedger, returned alongside it."""
        ledger = InMemoryLedger(custody=config.custody_address)
        return cls(ledger, sink=sink, config=config), ledger

    @property
    def fee_bps(self) -> int:
        """Swap fee applied by every pool of this AMM."""
        return self._config.fee_bps

    @property
    def config(self) -> AmmConfig:
        return self._config

    # --- Mutating operations ---

    def create_pool(
        self,
        asset_a: str,
        asset_b: str,
        amount0: int,
        amount1: int,
        *,
        sender: str,
    ) -> str:
        """Create the pool for a pair, seeded with amount0 of asset_a and amount1 of asset_b.

        Returns:
            The pool identifier, identical for either argument order
        """
        return self.liquidity.create_pool(
            asset_a, asset_b, amount0, amount1, sender=sender, fee_bps=self.fee_bps
        )

    def add_liquidity(self, pool_id: str, amount0: int, amount1: int, *, sender: str) -> int:
        """Deposit up to amount0/amount1 at the pool ratio. Returns shares minted."""
        return self.liquidity.add_liquidity(pool_id, amount0, amount1, sender=sender)

    def remove_liquidity(self, pool_id: str, share_amount: int, *, sender: str) -> tuple[int, int]:
        """Burn shares. Returns (amount0_out, amount1_out)."""
        return self.liquidity.remove_liquidity(pool_id, share_amount, sender=sender)

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
        """Sell amount_in of asset_in, paying the output to recipient. Returns amount out."""
        return self.swaps.swap(pool_id, asset_in, amount_in, min_amount_out, recipient, sender=sender)

    # --- Reads ---

    def get_pool(self, pool_id: str) -> PoolState:
        """(asset0, asset1, reserve0, reserve1, fee_bps, total_shares) for a pool."""
        return self.store.get_pool(pool_id)

    def get_share_balance(self, pool_id: str, holder: str) -> int:
        return self.store.get_share_balance(pool_id, holder)

    def find_pool(self, asset_a: str, asset_b: str) -> str | None:
        """Pool identifier for a pair in either order, None if it has no pool."""
        return self.store.find_pool_id(asset_a, asset_b)

    def quote_swap(self, pool_id: str, asset_in: str, amount_in: int) -> SwapQuote:
        return self.swaps.quote(pool_id, asset_in, amount_in)

    def preview_add_liquidity(self, pool_id: str, amount0: int, amount1: int) -> LiquidityQuote:
        return self.liquidity.preview_add_liquidity(pool_id, amount0, amount1)

    def preview_remove_liquidity(self, pool_id: str, share_amount: int) -> LiquidityQuote:
        return self.liquidity.preview_remove_liquidity(pool_id, share_amount)


__all__ = ["AMM"]
