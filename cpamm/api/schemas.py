"""Pydantic request and response bodies for the AMM HTTP API.

Amounts travel as uint256 decimal strings; field names are camelCase on
the wire and snake_case in Python.
"""

from pydantic import BaseModel, ConfigDict, Field

from cpamm.models.types import Address, PoolId, Uint256


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CreatePoolRequest(_Body):
    """Create a pool and seed it. amount0 goes with assetA, amount1 with assetB."""

    sender: Address
    asset_a: Address = Field(alias="assetA")
    asset_b: Address = Field(alias="assetB")
    amount0: Uint256
    amount1: Uint256


class CreatePoolResponse(_Body):
    pool_id: PoolId = Field(alias="poolId")


class PoolResponse(_Body):
    pool_id: PoolId = Field(alias="poolId")
    asset0: Address
    asset1: Address
    reserve0: Uint256
    reserve1: Uint256
    fee_bps: int = Field(alias="feeBps")
    total_shares: Uint256 = Field(alias="totalShares")


class ShareBalanceResponse(_Body):
    pool_id: PoolId = Field(alias="poolId")
    holder: Address
    shares: Uint256


class AddLiquidityRequest(_Body):
    sender: Address
    amount0: Uint256 = Field(description="Most of asset0 the sender will deposit.")
    amount1: Uint256 = Field(description="Most of asset1 the sender will deposit.")


class AddLiquidityResponse(_Body):
    shares_minted: Uint256 = Field(alias="sharesMinted")


class RemoveLiquidityRequest(_Body):
    sender: Address
    shares: Uint256


class RemoveLiquidityResponse(_Body):
    amount0: Uint256
    amount1: Uint256


class SwapRequest(_Body):
    sender: Address
    asset_in: Address = Field(alias="assetIn")
    amount_in: Uint256 = Field(alias="amountIn")
    min_amount_out: Uint256 = Field(default="0", alias="minAmountOut")
    recipient: Address | None = Field(
        default=None, description="Receiver of the output. Defaults to the sender."
    )


class SwapResponse(_Body):
    asset_out: Address = Field(alias="assetOut")
    amount_out: Uint256 = Field(alias="amountOut")


class QuoteRequest(_Body):
    asset_in: Address = Field(alias="assetIn")
    amount_in: Uint256 = Field(alias="amountIn")


class QuoteResponse(_Body):
    asset_out: Address = Field(alias="assetOut")
    amount_out: Uint256 = Field(alias="amountOut")
    reserve_in_after: Uint256 = Field(alias="reserveInAfter")
    reserve_out_after: Uint256 = Field(alias="reserveOutAfter")


class LedgerMintRequest(_Body):
    asset: Address
    owner: Address
    amount: Uint256


class LedgerApproveRequest(_Body):
    asset: Address
    owner: Address
    amount: Uint256


class LedgerBalanceResponse(_Body):
    asset: Address
    owner: Address
    balance: Uint256
    allowance: Uint256


class ErrorResponse(_Body):
    error: str = Field(description="Stable error code, e.g. 'slippage'.")
    detail: str
