"""Shared type definitions for AMM models.

Assets and accounts are identified by 0x-prefixed 20-byte hex addresses,
normalized to lowercase. Amounts cross the HTTP boundary as uint256
decimal strings.
"""

from typing import Annotated, Any

from eth_utils import is_hex_address
from pydantic import BeforeValidator, Field

from cpamm.errors import IdenticalAssets, InvalidToken
from cpamm.safe_int import UINT256_MAX


def validate_uint256(value: Any) -> str:
    """Validate that a value is a valid uint256 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint256 as decimal string

    Raises:
        ValueError: If value is not a valid non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 must be string or int, got bool")
    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return str(int_value)


# Ethereum-style address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]

# Pool identifier (32-byte keccak digest)
PoolId = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{64}$")]


def is_valid_address(address: str) -> bool:
    """Check if a string is a well-formed 0x-prefixed 20-byte address."""
    if not isinstance(address, str):
        return False
    return address.startswith(("0x", "0X")) and is_hex_address(address)


def normalize_address(address: str) -> str:
    """Normalize an address to lowercase with 0x prefix.

    Raises:
        InvalidToken: If the address is malformed
    """
    if not is_valid_address(address):
        raise InvalidToken(f"Invalid address: {address!r}")
    return "0x" + address[2:].lower()


def sort_assets(asset_a: str, asset_b: str) -> tuple[str, str]:
    """Return the pair in canonical order (numerically lower address first).

    Lowercase hex strings of equal length sort the same way as the numbers
    they encode, so a string comparison is enough once normalized.

    Raises:
        InvalidToken: If either address is malformed
        IdenticalAssets: If both addresses are the same asset
    """
    a = normalize_address(asset_a)
    b = normalize_address(asset_b)
    if a == b:
        raise IdenticalAssets(f"Pair needs two distinct assets, got {a} twice")
    return (a, b) if a < b else (b, a)
