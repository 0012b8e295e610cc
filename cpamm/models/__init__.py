"""Data models for pools and AMM events."""

from cpamm.models.events import AmmEvent, LiquidityAdded, LiquidityRemoved, PoolCreated, Swap
from cpamm.models.pool import Pool, PoolState
from cpamm.models.types import Address, PoolId, Uint256, normalize_address, sort_assets

__all__ = [
    # Types
    "Address",
    "PoolId",
    "Uint256",
    "normalize_address",
    "sort_assets",
    # Pool records
    "Pool",
    "PoolState",
    # Events
    "AmmEvent",
    "PoolCreated",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swap",
]
