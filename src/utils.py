"""Shared utilities for snapshot-viz."""

from __future__ import annotations

U64_MAX = (1 << 64) - 1


def parse_u64(value: int | str) -> int:
    """Convert a JSON number or numeric string to an unsigned 64-bit integer.

    Args:
        value: Integer, or string in hex (``0x`` prefix) or decimal form

    Returns:
        The integer value.

    Raises:
        TypeError: If the value is neither int nor str (bools are rejected).
        ValueError: If the string is not numeric or the value is out of range.

    Examples:
        >>> parse_u64(4096)
        4096
        >>> parse_u64("0x1000")
        4096
        >>> parse_u64(" 16 ")
        16
    """
    if isinstance(value, bool):
        msg = f"Unsupported number type: {type(value).__name__}"
        raise TypeError(msg)

    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        text = value.strip().lower()
        result = int(text, 16) if text.startswith("0x") else int(text, 10)
    else:
        msg = f"Unsupported number type: {type(value).__name__}"
        raise TypeError(msg)

    if result < 0 or result > U64_MAX:
        msg = f"value {value!r} is outside the unsigned 64-bit range"
        raise ValueError(msg)
    return result


def format_address(address: int) -> str:
    """Format an address as a zero-padded 64-bit hex string.

    Examples:
        >>> format_address(0x1000)
        '0x0000000000001000'
    """
    return f"0x{address:016x}"
