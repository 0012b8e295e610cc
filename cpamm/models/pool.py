"""Pool state records.

A Pool is the store's mutable record. Everything outside the store and the
engines sees a PoolState, an immutable snapshot taken between operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from cpamm.errors import InvalidToken
from cpamm.models.types import normalize_address


class PoolState(NamedTuple):
    """Read-only view of a pool, in the order callers unpack it."""

    asset0: str
    asset1: str
    reserve0: int
    reserve1: int
    fee_bps: int
    total_shares: int


@dataclass
class Pool:
    """A constant-product pool for one canonically ordered asset pair."""

    id: str
    asset0: str
    asset1: str
    # Fee in basis points, shared by every pool of an AMM instance
    fee_bps: int
    reserve0: int = 0
    reserve1: int = 0
    total_shares: int = 0
    # Holders with a zero balance are removed
    share_balances: dict[str, int] = field(default_factory=dict)

    @property
    def k(self) -> int:
        """Current reserve product."""
        return self.reserve0 * self.reserve1

    def has_asset(self, asset: str) -> bool:
        return normalize_address(asset) in (self.asset0, self.asset1)

    def get_reserves(self, asset_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out).

        Raises:
            InvalidToken: If asset_in is not one of the pool's assets
        """
        asset = normalize_address(asset_in)
        if asset == self.asset0:
            return self.reserve0, self.reserve1
        elif asset == self.asset1:
            return self.reserve1, self.reserve0
        else:
            raise InvalidToken(f"Asset {asset_in} not in pool {self.id}")

    def get_asset_out(self, asset_in: str) -> str:
        """Get the other asset of the pair.

        Raises:
            InvalidToken: If asset_in is not one of the pool's assets
        """
        asset = normalize_address(asset_in)
        if asset == self.asset0:
            return self.asset1
        elif asset == self.asset1:
            return self.asset0
        else:
            raise InvalidToken(f"Asset {asset_in} not in pool {self.id}")

    def share_balance(self, holder: str) -> int:
        return self.share_balances.get(normalize_address(holder), 0)

    def snapshot(self) -> PoolState:
        return PoolState(
            asset0=self.asset0,
            asset1=self.asset1,
            reserve0=self.reserve0,
            reserve1=self.reserve1,
            fee_bps=self.fee_bps,
            total_shares=self.total_shares,
        )
