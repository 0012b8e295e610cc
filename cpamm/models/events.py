"""Pydantic models for events describing completed AMM operations.

Each event carries an ``event`` literal so a mixed stream can be parsed
back with the AmmEvent discriminated union.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from cpamm.models.types import Address, PoolId


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    pool_id: PoolId = Field(description="Identifier of the pool the event belongs to.")


class PoolCreated(_Event):
    """A pool was registered for a new asset pair."""

    event: Literal["PoolCreated"] = "PoolCreated"
    asset0: Address
    asset1: Address


class LiquidityAdded(_Event):
    """A provider deposited both assets and received shares."""

    event: Literal["LiquidityAdded"] = "LiquidityAdded"
    provider: Address
    amount0: int = Field(ge=0)
    amount1: int = Field(ge=0)
    shares_minted: int = Field(ge=0)


class LiquidityRemoved(_Event):
    """A provider burned shares and withdrew both assets."""

    event: Literal["LiquidityRemoved"] = "LiquidityRemoved"
    provider: Address
    amount0: int = Field(ge=0)
    amount1: int = Field(ge=0)
    shares_burned: int = Field(ge=0)


class Swap(_Event):
    """An exact-input exchange of one pool asset for the other."""

    event: Literal["Swap"] = "Swap"
    sender: Address
    recipient: Address
    asset_in: Address
    amount_in: int = Field(ge=0)
    asset_out: Address
    amount_out: int = Field(ge=0)


AmmEvent = Annotated[
    PoolCreated | LiquidityAdded | LiquidityRemoved | Swap,
    Field(discriminator="event"),
]

__all__ = [
    "AmmEvent",
    "PoolCreated",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swap",
]
