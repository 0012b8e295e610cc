"""Protocol constants for the AMM core."""

from cpamm.safe_int import UINT256_MAX

# Fees are expressed in basis points of this denominator
BPS_DENOMINATOR = 10_000

# Default swap fee (30 bps = 0.3%, the conventional constant-product fee)
DEFAULT_FEE_BPS = 30

# Account that holds pooled assets in the in-memory ledger.
# Deployments pass their own custody address through AmmConfig.
DEFAULT_CUSTODY_ADDRESS = "0x00000000000000000000000000000000000a4a4a"

__all__ = [
    "BPS_DENOMINATOR",
    "DEFAULT_FEE_BPS",
    "DEFAULT_CUSTODY_ADDRESS",
    "UINT256_MAX",
]
