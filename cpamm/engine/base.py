"""Shared plumbing for the liquidity and swap engines."""

from __future__ import annotations

from cpamm.adapters.notifications import NotificationSink, deliver
from cpamm.adapters.transfers import AssetTransferAdapter
from cpamm.errors import InsufficientAmounts
from cpamm.math.constant_product import ConstantProductMath, constant_product
from cpamm.models.events import AmmEvent
from cpamm.pools.store import PoolStore


class Engine:
    """Holds the store and collaborators an engine operates on.

    Engines validate and compute everything before touching the transfer
    adapter, and write the pool record only after every transfer has gone
    through. A rejected operation therefore leaves the store untouched.
    """

    def __init__(
        self,
        store: PoolStore,
        transfers: AssetTransferAdapter,
        sink: NotificationSink,
        math: ConstantProductMath = constant_product,
    ) -> None:
        self.store = store
        self.transfers = transfers
        self.sink = sink
        self.math = math

    def _emit(self, event: AmmEvent) -> None:
        deliver(self.sink, event)


def require_positive(amount: int, name: str) -> int:
    """Validate a caller-supplied amount that must be above zero.

    Raises:
        TypeError: If amount is not an int
        InsufficientAmounts: If amount is zero or negative
    """
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError(f"{name} must be int, got {type(amount).__name__}")
    if amount <= 0:
        raise InsufficientAmounts(f"{name} must be positive, got {amount}")
    return amount


def require_non_negative(amount: int, name: str) -> int:
    """Validate a caller-supplied bound that may be zero.

    Raises:
        TypeError: If amount is not an int
        InsufficientAmounts: If amount is negative
    """
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError(f"{name} must be int, got {type(amount).__name__}")
    if amount < 0:
        raise InsufficientAmounts(f"{name} cannot be negative, got {amount}")
    return amount
