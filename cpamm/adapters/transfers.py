"""Asset transfer adapters.

The AMM never keeps asset balances itself. It asks an AssetTransferAdapter
to pull assets from an owner into custody and to push them back out.
InMemoryLedger is a self-contained adapter with approve/allowance
semantics for local hosting and tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import structlog

from cpamm.errors import InsufficientAllowance, InsufficientAmounts, InsufficientBalance
from cpamm.models.types import normalize_address

logger = structlog.get_logger()


@runtime_checkable
class AssetTransferAdapter(Protocol):
    """Moves asset units into and out of the AMM's custody."""

    def pull(self, asset: str, owner: str, amount: int) -> None:
        """Move amount of asset from owner into custody.

        Raises:
            InsufficientAllowance: If owner has not authorized the amount
            InsufficientBalance: If owner does not hold the amount
        """
        ...

    def push(self, asset: str, recipient: str, amount: int) -> None:
        """Move amount of asset from custody to recipient.

        Raises:
            InsufficientBalance: If custody does not hold the amount
        """
        ...


class InMemoryLedger:
    """Fungible asset balances and allowances held in memory.

    Every asset is a separate ledger of balances plus allowances granted by
    owners to the custody account, like a set of ERC-20 tokens sharing one
    spender. Custody itself can never be pulled from.
    """

    def __init__(self, custody: str) -> None:
        self.custody = normalize_address(custody)
        self._balances: dict[tuple[str, str], int] = {}
        self._allowances: dict[tuple[str, str, str], int] = {}

    def balance_of(self, asset: str, owner: str) -> int:
        return self._balances.get((normalize_address(asset), normalize_address(owner)), 0)

    def allowance(self, asset: str, owner: str, spender: str | None = None) -> int:
        spender_norm = self.custody if spender is None else normalize_address(spender)
        key = (normalize_address(asset), normalize_address(owner), spender_norm)
        return self._allowances.get(key, 0)

    def mint(self, asset: str, owner: str, amount: int) -> None:
        """Create amount of asset out of thin air for owner."""
        _require_non_negative(amount)
        key = (normalize_address(asset), normalize_address(owner))
        self._balances[key] = self._balances.get(key, 0) + amount

    def approve(self, asset: str, owner: str, amount: int, spender: str | None = None) -> None:
        """Set (not add to) the amount spender may pull from owner."""
        _require_non_negative(amount)
        spender_norm = self.custody if spender is None else normalize_address(spender)
        key = (normalize_address(asset), normalize_address(owner), spender_norm)
        self._allowances[key] = amount

    def pull(self, asset: str, owner: str, amount: int) -> None:
        _require_non_negative(amount)
        asset_norm = normalize_address(asset)
        owner_norm = normalize_address(owner)
        if owner_norm == self.custody:
            # Custody never funds its own reserves
            raise InsufficientAllowance(f"Custody {owner_norm} cannot pull {asset_norm} from itself")
        allowance_key = (asset_norm, owner_norm, self.custody)
        allowed = self._allowances.get(allowance_key, 0)
        if allowed < amount:
            raise InsufficientAllowance(
                f"{owner_norm} allowed {allowed} of {asset_norm}, pull needs {amount}"
            )
        held = self._balances.get((asset_norm, owner_norm), 0)
        if held < amount:
            raise InsufficientBalance(f"{owner_norm} holds {held} of {asset_norm}, pull needs {amount}")
        self._allowances[allowance_key] = allowed - amount
        self._move(asset_norm, owner_norm, self.custody, amount)

    def push(self, asset: str, recipient: str, amount: int) -> None:
        _require_non_negative(amount)
        asset_norm = normalize_address(asset)
        held = self._balances.get((asset_norm, self.custody), 0)
        if held < amount:
            raise InsufficientBalance(f"Custody holds {held} of {asset_norm}, push needs {amount}")
        self._move(asset_norm, self.custody, normalize_address(recipient), amount)

    def _move(self, asset: str, source: str, target: str, amount: int) -> None:
        self._balances[(asset, source)] = self._balances.get((asset, source), 0) - amount
        self._balances[(asset, target)] = self._balances.get((asset, target), 0) + amount


def pull_all(
    transfers: AssetTransferAdapter,
    owner: str,
    legs: Sequence[tuple[str, int]],
) -> None:
    """Pull several (asset, amount) legs from owner as one unit.

    If a leg fails, the legs already pulled are pushed back to owner before
    the error propagates, so the owner ends up where they started.
    """
    done: list[tuple[str, int]] = []
    try:
        for asset, amount in legs:
            transfers.pull(asset, owner, amount)
            done.append((asset, amount))
    except Exception:
        for asset, amount in reversed(done):
            transfers.push(asset, owner, amount)
        if done:
            logger.info("pull_rolled_back", owner=owner[-8:], refunded_legs=len(done))
        raise


def _require_non_negative(amount: int) -> None:
    if amount < 0:
        raise InsufficientAmounts(f"Amount cannot be negative: {amount}")


__all__ = [
    "AssetTransferAdapter",
    "InMemoryLedger",
    "pull_all",
]
