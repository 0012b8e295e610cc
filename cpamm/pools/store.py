"""Pool store: the authoritative table of pools.

Pools are keyed by an identifier derived from the canonically ordered asset
pair, with a secondary index from the pair itself. The store only holds
state; the liquidity and swap engines decide what to write into it.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog
from eth_abi import encode  # type: ignore[attr-defined]
from eth_utils import keccak

from cpamm.errors import PoolExists, PoolNotFound
from cpamm.models.pool import Pool, PoolState
from cpamm.models.types import normalize_address, sort_assets

logger = structlog.get_logger()


def derive_pool_id(asset_a: str, asset_b: str) -> str:
    """Derive the pool identifier for a pair (argument order does not matter).

    The id is keccak256(abi.encode(asset0, asset1)) over the canonically
    ordered pair, so it depends on nothing but the two assets.

    Raises:
        InvalidToken: If either address is malformed
        IdenticalAssets: If both addresses are the same asset
    """
    asset0, asset1 = sort_assets(asset_a, asset_b)
    encoded = encode(
        ["address", "address"],
        [bytes.fromhex(asset0[2:]), bytes.fromhex(asset1[2:])],
    )
    return "0x" + keccak(encoded).hex()


class PoolStore:
    """Registry of pools by identifier and by canonical asset pair."""

    def __init__(self) -> None:
        self._pools: dict[str, Pool] = {}
        self._ids_by_pair: dict[tuple[str, str], str] = {}

    def __len__(self) -> int:
        return len(self._pools)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._pools))

    def __contains__(self, pool_id: object) -> bool:
        return isinstance(pool_id, str) and pool_id.lower() in self._pools

    def pool_ids(self) -> list[str]:
        """All pool identifiers, in creation order."""
        return list(self._pools)

    def open_pool(self, asset_a: str, asset_b: str, fee_bps: int) -> Pool:
        """Build an empty, uncommitted pool record for a new pair.

        Raises:
            InvalidToken: If either address is malformed
            IdenticalAssets: If both addresses are the same asset
            PoolExists: If the pair already has a pool
        """
        asset0, asset1 = sort_assets(asset_a, asset_b)
        if (asset0, asset1) in self._ids_by_pair:
            raise PoolExists(f"Pool already exists for {asset0}/{asset1}")
        return Pool(
            id=derive_pool_id(asset0, asset1),
            asset0=asset0,
            asset1=asset1,
            fee_bps=fee_bps,
        )

    def commit(self, pool: Pool) -> None:
        """Register a pool built by open_pool.

        Raises:
            PoolExists: If the pair was registered in the meantime
        """
        pair = (pool.asset0, pool.asset1)
        if pair in self._ids_by_pair or pool.id in self._pools:
            raise PoolExists(f"Pool already exists for {pool.asset0}/{pool.asset1}")
        self._pools[pool.id] = pool
        self._ids_by_pair[pair] = pool.id
        logger.debug(
            "pool_registered",
            pool_id=pool.id[-8:],
            asset0=pool.asset0[-8:],
            asset1=pool.asset1[-8:],
            pool_count=len(self._pools),
        )

    def get(self, pool_id: str) -> Pool:
        """Get the mutable pool record. Only the engines should write to it.

        Raises:
            PoolNotFound: If no pool has this identifier
        """
        pool = self._pools.get(pool_id.lower()) if isinstance(pool_id, str) else None
        if pool is None:
            raise PoolNotFound(f"Pool does not exist: {pool_id}")
        return pool

    def get_pool(self, pool_id: str) -> PoolState:
        """Snapshot of a pool's assets, reserves, fee and total shares.

        Raises:
            PoolNotFound: If no pool has this identifier
        """
        return self.get(pool_id).snapshot()

    def get_share_balance(self, pool_id: str, holder: str) -> int:
        """Shares held by holder in a pool (0 if the holder has none).

        Raises:
            PoolNotFound: If no pool has this identifier
        """
        return self.get(pool_id).share_balance(holder)

    def find_pool_id(self, asset_a: str, asset_b: str) -> str | None:
        """Look up the pool for a pair in either order, None if there is none."""
        a = normalize_address(asset_a)
        b = normalize_address(asset_b)
        key = (a, b) if a < b else (b, a)
        return self._ids_by_pair.get(key)


__all__ = ["PoolStore", "derive_pool_id"]
