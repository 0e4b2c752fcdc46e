"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass

from .errors import UnderflowError


@dataclass(frozen=True)
class RateCurve:
    """Interest-rate curve parameters of a Compound-style market."""

    base_rate_per_period: int
    multiplier_per_period: int


@dataclass(frozen=True)
class MarketSnapshot:
    """Point-in-time read of the quantities that drive a market's supply rate.

    Every field is a non-negative integer scaled by 1e18.
    """

    total_borrows: int
    available_cash: int
    total_reserves: int
    reserve_factor: int
    base_rate_per_period: int
    multiplier_per_period: int

    def __post_init__(self) -> None:
        for name, value in vars(self).items():
            if value < 0:
                raise UnderflowError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class AprQuote:
    """Read-only rate summary for one configured market."""

    market: str
    current_apr: int
    projected_apr: int
    deposit_amount: int
    available_liquidity: int
    exchange_rate: int
    underlying_decimals: int = 18
