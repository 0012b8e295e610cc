"""Checked integer arithmetic for reserve and share math.

Pool math works on unbounded Python ints, but every value that ends up in a
pool must still be a valid uint256 and no intermediate step may silently go
negative or divide by zero. SafeInt wraps an int and turns those cases into
exceptions:
- Division by zero raises DivisionByZero
- Subtraction below zero raises Underflow
- Values outside [0, 2^256-1] raise Uint256Overflow on to_uint256()

Usage pattern:
    from cpamm.safe_int import S

    def shares_for(amount: int, reserve: int, total: int) -> int:
        return (S(amount) * S(total) // S(reserve)).to_uint256()
"""

from __future__ import annotations

import math

UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce a negative result."""

    pass


class Uint256Overflow(SafeIntError):
    """Value does not fit in a uint256."""

    pass


class SafeInt:
    """Integer with checked arithmetic.

    Only the operations pool math needs are provided: addition,
    subtraction, multiplication, floor division, comparisons, integer
    square root and a fused multiply-then-divide.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _unwrap(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If the result would be negative
        """
        other_val = _unwrap(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _unwrap(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Floor division.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _unwrap(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _unwrap(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _unwrap(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _unwrap(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _unwrap(other)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    # --- Named operations ---

    def mul_div(self, numerator: SafeInt | int, denominator: SafeInt | int) -> SafeInt:
        """Compute floor(self * numerator / denominator) without losing precision.

        Raises:
            DivisionByZero: If denominator is zero
        """
        return (self * numerator) // denominator

    def min(self, other: SafeInt | int) -> SafeInt:
        """Return the smaller of self and other."""
        return SafeInt(min(self._value, _unwrap(other)))

    def isqrt(self) -> SafeInt:
        """Integer square root, rounded down.

        Raises:
            Underflow: If the value is negative
        """
        if self._value < 0:
            raise Underflow(f"Square root of negative value: {self._value}")
        return SafeInt(math.isqrt(self._value))

    def to_uint256(self) -> int:
        """Convert to int, validating uint256 bounds.

        Raises:
            Uint256Overflow: If value is negative or exceeds 2^256-1
        """
        if self._value < 0:
            raise Uint256Overflow(f"Negative value cannot be uint256: {self._value}")
        if self._value > UINT256_MAX:
            raise Uint256Overflow(f"Value exceeds uint256 max: {self._value}")
        return self._value

    def is_uint256(self) -> bool:
        """Check if value fits in uint256 without raising."""
        return 0 <= self._value <= UINT256_MAX

    @classmethod
    def zero(cls) -> SafeInt:
        return cls(0)


def _unwrap(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
