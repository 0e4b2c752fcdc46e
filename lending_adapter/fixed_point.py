"""Checked unsigned 256-bit fixed-point arithmetic.

Market quantities are integers scaled by ``ONE`` (1e18). Python integers
never wrap, so every operation here enforces the bounds of an unsigned
256-bit word explicitly and raises instead of producing a value the
market itself could never hold.
"""
from __future__ import annotations

from .errors import UnderflowError

ONE = 10**18
PERCENT = 100
MAX_UINT256 = 2**256 - 1


def _check(value: int) -> int:
    if value > MAX_UINT256:
        raise OverflowError(f"uint256 overflow: {value:#x}")
    return value


def add(a: int, b: int) -> int:
    return _check(a + b)


def sub(a: int, b: int) -> int:
    if b > a:
        raise UnderflowError(f"uint256 underflow: {a} - {b}")
    return a - b


def mul(a: int, b: int) -> int:
    return _check(a * b)


def div(a: int, b: int) -> int:
    """Floor division; a zero divisor raises ``ZeroDivisionError``."""
    if b == 0:
        raise ZeroDivisionError(f"division by zero: {a} / 0")
    return a // b


def annualize(rate_per_period: int, periods_per_year: int) -> int:
    """Per-period rate -> annual percentage rate, still scaled by ``ONE``."""
    return mul(mul(rate_per_period, periods_per_year), PERCENT)
