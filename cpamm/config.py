"""Configuration for an AMM instance."""

import os
from dataclasses import dataclass

from cpamm.constants import BPS_DENOMINATOR, DEFAULT_CUSTODY_ADDRESS, DEFAULT_FEE_BPS
from cpamm.errors import InvalidFee
from cpamm.models.types import normalize_address


@dataclass(frozen=True)
class AmmConfig:
    """Settings fixed when an AMM is constructed.

    Attributes:
        fee_bps: Swap fee in basis points applied by every pool (default: 30)
        custody_address: Account holding pooled assets in the in-memory ledger
    """

    fee_bps: int = DEFAULT_FEE_BPS
    custody_address: str = DEFAULT_CUSTODY_ADDRESS

    def __post_init__(self) -> None:
        if not isinstance(self.fee_bps, int) or isinstance(self.fee_bps, bool):
            raise InvalidFee(f"fee_bps must be int, got {type(self.fee_bps).__name__}")
        if not 0 <= self.fee_bps <= BPS_DENOMINATOR:
            raise InvalidFee(f"fee_bps must be in [0, {BPS_DENOMINATOR}], got {self.fee_bps}")
        object.__setattr__(self, "custody_address", normalize_address(self.custody_address))

    @classmethod
    def from_env(cls) -> "AmmConfig":
        """Build a config from environment variables.

        - AMM_FEE_BPS: Swap fee in basis points (default: 30)
        - AMM_CUSTODY_ADDRESS: Custody account (default: DEFAULT_CUSTODY_ADDRESS)
        """
        raw_fee = os.environ.get("AMM_FEE_BPS", str(DEFAULT_FEE_BPS))
        try:
            fee_bps = int(raw_fee)
        except ValueError as err:
            raise InvalidFee(f"AMM_FEE_BPS must be an integer, got {raw_fee!r}") from err
        return cls(
            fee_bps=fee_bps,
            custody_address=os.environ.get("AMM_CUSTODY_ADDRESS", DEFAULT_CUSTODY_ADDRESS),
        )


# Default configuration instance
DEFAULT_AMM_CONFIG = AmmConfig()
