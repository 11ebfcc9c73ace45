"""Shared integer types for pool snapshot models.

Hosts serialize on-chain integers as decimal strings so that 256-bit values
survive JSON. These annotated types accept either a string or an int and
keep the validated decimal string.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from rmm.safe_int import INT256_MAX, INT256_MIN, UINT256_MAX


def _parse_decimal_integer(value: Any, type_name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{type_name} must be string or int, got bool")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"{type_name} must be string or int, got {type(value).__name__}")
    try:
        return int(value)
    except ValueError as err:
        raise ValueError(f"{type_name} must be a decimal integer string: '{value}'") from err


def validate_uint256(value: Any) -> str:
    """Validate that a value is a valid uint256 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint256 as decimal string

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    int_value = _parse_decimal_integer(value, "Uint256")
    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return str(int_value)


def validate_int256(value: Any) -> str:
    """Validate that a value is a valid int256 decimal string.

    Raises:
        ValueError: If value is not an integer within int256 range
    """
    int_value = _parse_decimal_integer(value, "Int256")
    if not INT256_MIN <= int_value <= INT256_MAX:
        raise ValueError(f"Int256 out of range: {value}")
    return str(int_value)


# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]

# 256-bit signed integer as decimal string (validated)
Int256 = Annotated[
    str,
    BeforeValidator(validate_int256),
    Field(description="256-bit signed integer as decimal string"),
]
