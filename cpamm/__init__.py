"""Constant product AMM core - multi-pool liquidity and swaps."""

from cpamm.config import AmmConfig
from cpamm.core import AMM
from cpamm.errors import AmmError, InvariantViolation

__version__ = "0.1.0"
__all__ = ["AMM", "AmmConfig", "AmmError", "InvariantViolation", "__version__"]
