"""Pool management package.

Provides PoolStore, the authoritative table of pools, and the pool
identifier derivation.
"""

from .store import PoolStore, derive_pool_id

__all__ = [
    "PoolStore",
    "derive_pool_id",
]
