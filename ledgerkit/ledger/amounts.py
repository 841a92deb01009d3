"""
Amount normalization.

Every amount that reaches a staged operation is a signed 64-bit integer
in the smallest unit (tinybars for hbar, base units for tokens).
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from ledgerkit.errors import InvalidAmount

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

TINYBARS_PER_HBAR = 100_000_000

AmountInput = Union[int, float, str, Decimal, None]


def _check_range(value: int) -> int:
    if value < INT64_MIN or value > INT64_MAX:
        raise InvalidAmount(f"Amount {value} does not fit in a signed 64-bit integer")
    return value


def _to_decimal(value: int | float | str | Decimal) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmount(f"Boolean is not a valid amount: {value!r}")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as e:
        raise InvalidAmount(f"Not a numeric amount: {value!r}") from e


def normalize_amount(value: AmountInput) -> int:
    """
    Normalize an amount to a 64-bit integer.

    Args:
        value: int, integral float/Decimal, numeric string, or None

    Returns:
        The integer amount (0 when value is None)

    Raises:
        InvalidAmount: If the value is fractional, non-numeric or out of range
    """
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        return _check_range(value)

    amount = _to_decimal(value)
    if not amount.is_finite() or amount != amount.to_integral_value():
        raise InvalidAmount(f"Amount must be a whole number: {value!r}")
    return _check_range(int(amount))


def hbar_to_tinybars(value: int | float | str | Decimal) -> int:
    """
    Convert an hbar amount to tinybars.

    Raises:
        InvalidAmount: If the amount has sub-tinybar precision or is out of range
    """
    tinybars = _to_decimal(value) * TINYBARS_PER_HBAR
    if not tinybars.is_finite() or tinybars != tinybars.to_integral_value():
        raise InvalidAmount(f"Hbar amount has more precision than one tinybar: {value!r}")
    return _check_range(int(tinybars))


def tinybars_to_hbar(tinybars: int) -> Decimal:
    """Convert tinybars to a Decimal hbar amount."""
    return Decimal(tinybars) / TINYBARS_PER_HBAR


def format_hbar(tinybars: int) -> str:
    """Format tinybars as a human readable hbar string, e.g. '1.5 ℏ'."""
    hbar = tinybars_to_hbar(tinybars).normalize()
    return f"{hbar:f} ℏ"
