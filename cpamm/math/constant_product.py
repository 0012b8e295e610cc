"""Constant product (x * y = k) pool math.

All functions work on integers in the assets' smallest units and round
down with floor division, so every result can be reproduced exactly by an
integer reference implementation. The fee is taken from the input side:

    amount_in_after_fee = amount_in * (10000 - fee_bps) // 10000
    amount_out = amount_in_after_fee * reserve_out // (reserve_in + amount_in_after_fee)

Because the full amount_in is credited to the pool while only the
after-fee part is priced, the reserve product never decreases.
"""

from __future__ import annotations

from cpamm.constants import BPS_DENOMINATOR
from cpamm.safe_int import S


class ConstantProductMath:
    """Swap, deposit and withdrawal math for constant product pools."""

    def apply_fee(self, amount_in: int, fee_bps: int) -> int:
        """Return the part of amount_in that is priced after the fee is taken.

        For 30 bps, 1_000_000 becomes 997_000.
        """
        return S(amount_in).mul_div(S(BPS_DENOMINATOR) - S(fee_bps), BPS_DENOMINATOR).to_uint256()

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_bps: int,
    ) -> int:
        """Calculate the output of an exact-input swap.

        Args:
            amount_in: Input asset amount, before the fee
            reserve_in: Reserve of the input asset
            reserve_out: Reserve of the output asset
            fee_bps: Pool fee in basis points

        Returns:
            Output asset amount, 0 if any argument leaves nothing to trade
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_after_fee = S(self.apply_fee(amount_in, fee_bps))
        numerator = amount_in_after_fee * S(reserve_out)
        denominator = S(reserve_in) + amount_in_after_fee
        return (numerator // denominator).to_uint256()

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Return the amount of B worth amount_a of A at the current pool ratio."""
        return S(amount_a).mul_div(reserve_b, reserve_a).to_uint256()

    def initial_shares(self, amount0: int, amount1: int) -> int:
        """Shares minted for the first deposit: floor(sqrt(amount0 * amount1)).

        The geometric mean does not depend on how the deposit is split
        between the two assets, so seeding a pool with a skewed ratio does
        not buy a larger claim.
        """
        return (S(amount0) * S(amount1)).isqrt().to_uint256()

    def optimal_deposit(
        self,
        amount0_desired: int,
        amount1_desired: int,
        reserve0: int,
        reserve1: int,
    ) -> tuple[int, int]:
        """Largest deposit within the desired amounts that keeps the pool ratio.

        One side is consumed in full; the other is cut down to the matching
        amount. Whatever is left over stays with the provider.
        """
        amount1_optimal = self.quote(amount0_desired, reserve0, reserve1)
        if amount1_optimal <= amount1_desired:
            return amount0_desired, amount1_optimal
        amount0_optimal = self.quote(amount1_desired, reserve1, reserve0)
        return amount0_optimal, amount1_desired

    def shares_for_deposit(
        self,
        amount0: int,
        amount1: int,
        reserve0: int,
        reserve1: int,
        total_shares: int,
    ) -> int:
        """Shares minted for a deposit: total_shares * min(a0/r0, a1/r1), floored."""
        shares0 = S(amount0).mul_div(total_shares, reserve0)
        shares1 = S(amount1).mul_div(total_shares, reserve1)
        return shares0.min(shares1).to_uint256()

    def amounts_for_shares(
        self,
        shares: int,
        reserve0: int,
        reserve1: int,
        total_shares: int,
    ) -> tuple[int, int]:
        """Pro-rata reserves owed for burning shares, floored."""
        amount0 = S(reserve0).mul_div(shares, total_shares)
        amount1 = S(reserve1).mul_div(shares, total_shares)
        return amount0.to_uint256(), amount1.to_uint256()


# Singleton instance
constant_product = ConstantProductMath()


__all__ = [
    "ConstantProductMath",
    "constant_product",
]
