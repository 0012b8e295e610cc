"""AMM error classes.

Every AmmError is a caller-recoverable validation failure: the operation
is rejected before any state changes and the caller decides whether to
retry with different arguments. Each class carries a stable ``code`` that
the HTTP layer returns to clients.

InvariantViolation is not an AmmError. It signals broken pool math and is
never something a caller can fix.
"""


class AmmError(Exception):
    """Base error for AMM operations."""

    code = "amm error"


class PoolExists(AmmError):
    """A pool for this asset pair has already been created."""

    code = "pool exists"


class PoolNotFound(AmmError):
    """No pool is registered under the given identifier."""

    code = "pool not found"


class InsufficientAmounts(AmmError):
    """A required amount is zero or negative."""

    code = "insufficient amounts"


class InsufficientLiquidity(AmmError):
    """The pool or the caller's share balance cannot cover the request."""

    code = "insufficient liquidity"


class InvalidToken(AmmError):
    """Asset is malformed or not one of the pool's two assets."""

    code = "invalid token"


class IdenticalAssets(InvalidToken):
    """Both sides of a pair are the same asset."""

    code = "identical assets"


class SlippageExceeded(AmmError):
    """Swap output is below the caller's minimum."""

    code = "slippage"


class InsufficientAllowance(AmmError):
    """Owner has not authorized the AMM to move this amount."""

    code = "insufficient allowance"


class InsufficientBalance(AmmError):
    """Account does not hold enough of the asset."""

    code = "insufficient balance"


class InvalidFee(AmmError):
    """Fee must be in range [0, 10000] basis points."""

    code = "invalid fee"


class InvariantViolation(Exception):
    """Post-swap reserve product fell below the pre-swap product.

    Raised only when fee or rounding math is defective. Operators must be
    alerted; the failed operation has been aborted without state changes.
    """

    code = "invariant violation"

    def __init__(self, pool_id: str, k_before: int, k_after: int) -> None:
        self.pool_id = pool_id
        self.k_before = k_before
        self.k_after = k_after
        super().__init__(f"k decreased in pool {pool_id}: {k_before} -> {k_after}")


__all__ = [
    "AmmError",
    "PoolExists",
    "PoolNotFound",
    "InsufficientAmounts",
    "InsufficientLiquidity",
    "InvalidToken",
    "IdenticalAssets",
    "SlippageExceeded",
    "InsufficientAllowance",
    "InsufficientBalance",
    "InvalidFee",
    "InvariantViolation",
]
