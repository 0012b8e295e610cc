"""Engines that apply liquidity and swap operations to a PoolStore."""

from cpamm.engine.liquidity import LiquidityEngine, LiquidityQuote
from cpamm.engine.swap import SwapEngine, SwapQuote

__all__ = [
    "LiquidityEngine",
    "LiquidityQuote",
    "SwapEngine",
    "SwapQuote",
]
