"""API endpoints for the AMM.

Handlers are ``async def`` and call the core without awaiting, so every
request runs to completion on the event loop before the next one starts.
That is the single-writer guarantee the core relies on; do not move these
calls into a thread pool.
"""

from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends, HTTPException

from cpamm.adapters.transfers import InMemoryLedger
from cpamm.api.schemas import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    CreatePoolRequest,
    CreatePoolResponse,
    LedgerApproveRequest,
    LedgerBalanceResponse,
    LedgerMintRequest,
    PoolResponse,
    QuoteRequest,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    ShareBalanceResponse,
    SwapRequest,
    SwapResponse,
)
from cpamm.config import AmmConfig
from cpamm.core import AMM

logger = structlog.get_logger()

router = APIRouter()


@lru_cache(maxsize=1)
def get_default_amm() -> AMM:
    """Process-wide AMM backed by an in-memory ledger, configured from the environment."""
    config = AmmConfig.from_env()
    amm, _ledger = AMM.in_memory(config)
    logger.info("amm_initialized", fee_bps=config.fee_bps, custody=config.custody_address)
    return amm


def get_amm() -> AMM:
    """Dependency provider for the AMM instance.

    Override this in tests to inject a fresh AMM:
        app.dependency_overrides[get_amm] = lambda: amm
    """
    return get_default_amm()


def get_ledger(amm: AMM = Depends(get_amm)) -> InMemoryLedger:
    """The AMM's ledger, when it is the in-memory one."""
    if not isinstance(amm.transfers, InMemoryLedger):
        raise HTTPException(status_code=404, detail="Ledger is managed outside this service")
    return amm.transfers


def _pool_response(amm: AMM, pool_id: str) -> PoolResponse:
    state = amm.get_pool(pool_id)
    return PoolResponse(
        pool_id=pool_id.lower(),
        asset0=state.asset0,
        asset1=state.asset1,
        reserve0=state.reserve0,
        reserve1=state.reserve1,
        fee_bps=state.fee_bps,
        total_shares=state.total_shares,
    )


# --- Pools ---


@router.post("/pools", status_code=201)
async def create_pool(request: CreatePoolRequest, amm: AMM = Depends(get_amm)) -> CreatePoolResponse:
    """Create a pool for a new pair and seed it with the sender's deposit."""
    pool_id = amm.create_pool(
        request.asset_a,
        request.asset_b,
        int(request.amount0),
        int(request.amount1),
        sender=request.sender,
    )
    return CreatePoolResponse(pool_id=pool_id)


@router.get("/pools/by-pair/{asset_a}/{asset_b}")
async def find_pool(asset_a: str, asset_b: str, amm: AMM = Depends(get_amm)) -> PoolResponse:
    """Look up a pool by its two assets, in either order."""
    pool_id = amm.find_pool(asset_a, asset_b)
    if pool_id is None:
        raise HTTPException(status_code=404, detail=f"No pool for {asset_a}/{asset_b}")
    return _pool_response(amm, pool_id)


@router.get("/pools/{pool_id}")
async def get_pool(pool_id: str, amm: AMM = Depends(get_amm)) -> PoolResponse:
    return _pool_response(amm, pool_id)


@router.get("/pools/{pool_id}/shares/{holder}")
async def get_share_balance(
    pool_id: str, holder: str, amm: AMM = Depends(get_amm)
) -> ShareBalanceResponse:
    shares = amm.get_share_balance(pool_id, holder)
    return ShareBalanceResponse(pool_id=pool_id.lower(), holder=holder.lower(), shares=shares)


@router.post("/pools/{pool_id}/liquidity")
async def add_liquidity(
    pool_id: str, request: AddLiquidityRequest, amm: AMM = Depends(get_amm)
) -> AddLiquidityResponse:
    shares = amm.add_liquidity(
        pool_id, int(request.amount0), int(request.amount1), sender=request.sender
    )
    return AddLiquidityResponse(shares_minted=shares)


@router.post("/pools/{pool_id}/liquidity/remove")
async def remove_liquidity(
    pool_id: str, request: RemoveLiquidityRequest, amm: AMM = Depends(get_amm)
) -> RemoveLiquidityResponse:
    amount0, amount1 = amm.remove_liquidity(pool_id, int(request.shares), sender=request.sender)
    return RemoveLiquidityResponse(amount0=amount0, amount1=amount1)


@router.post("/pools/{pool_id}/swap")
async def swap(pool_id: str, request: SwapRequest, amm: AMM = Depends(get_amm)) -> SwapResponse:
    recipient = request.recipient or request.sender
    amount_out = amm.swap(
        pool_id,
        request.asset_in,
        int(request.amount_in),
        int(request.min_amount_out),
        recipient,
        sender=request.sender,
    )
    asset_out = amm.store.get(pool_id).get_asset_out(request.asset_in)
    return SwapResponse(asset_out=asset_out, amount_out=amount_out)


@router.post("/pools/{pool_id}/quote")
async def quote(pool_id: str, request: QuoteRequest, amm: AMM = Depends(get_amm)) -> QuoteResponse:
    """Price a swap against current reserves without executing it."""
    result = amm.quote_swap(pool_id, request.asset_in, int(request.amount_in))
    return QuoteResponse(
        asset_out=result.asset_out,
        amount_out=result.amount_out,
        reserve_in_after=result.reserve_in_after,
        reserve_out_after=result.reserve_out_after,
    )


# --- In-memory ledger administration ---


def _balance_response(ledger: InMemoryLedger, asset: str, owner: str) -> LedgerBalanceResponse:
    return LedgerBalanceResponse(
        asset=asset.lower(),
        owner=owner.lower(),
        balance=ledger.balance_of(asset, owner),
        allowance=ledger.allowance(asset, owner),
    )


@router.post("/ledger/mint")
async def mint(
    request: LedgerMintRequest, ledger: InMemoryLedger = Depends(get_ledger)
) -> LedgerBalanceResponse:
    ledger.mint(request.asset, request.owner, int(request.amount))
    return _balance_response(ledger, request.asset, request.owner)


@router.post("/ledger/approve")
async def approve(
    request: LedgerApproveRequest, ledger: InMemoryLedger = Depends(get_ledger)
) -> LedgerBalanceResponse:
    """Let the AMM's custody account pull up to amount of asset from owner."""
    ledger.approve(request.asset, request.owner, int(request.amount))
    return _balance_response(ledger, request.asset, request.owner)


@router.get("/ledger/{asset}/{owner}")
async def balance(
    asset: str, owner: str, ledger: InMemoryLedger = Depends(get_ledger)
) -> LedgerBalanceResponse:
    return _balance_response(ledger, asset, owner)
