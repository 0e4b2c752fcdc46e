"""Compound-style supply-rate projection — pure functions, no I/O."""
from __future__ import annotations

import logging

from ... import fixed_point as fp
from ...errors import UnderflowError
from ...interfaces.market import CompoundMarket
from ...models import MarketSnapshot

logger = logging.getLogger(__name__)


def read_snapshot(market: CompoundMarket) -> MarketSnapshot:
    """Read the quantities the projection needs straight from the market."""
    curve = market.rate_curve_parameters()
    return MarketSnapshot(
        total_borrows=market.total_borrows(),
        available_cash=market.available_cash(),
        total_reserves=market.total_reserves(),
        reserve_factor=market.reserve_factor_fraction(),
        base_rate_per_period=curve.base_rate_per_period,
        multiplier_per_period=curve.multiplier_per_period,
    )


def project_supply_rate(
    snapshot: MarketSnapshot,
    deposit_amount: int,
    annualization_constant: int,
) -> int:
    """Annual supply rate the market would pay after absorbing a deposit.

    The result is a percentage scaled by 1e18. Intermediate results are
    truncated, so the steps below must run in exactly this order:

        marginal    = borrows * multiplier / (borrows + cash + deposit)
        denominator = cash + deposit + borrows - reserves
        per_period  = (base + marginal) / periods * (1e18 - reserve_factor)
        annual      = per_period * borrows / denominator / 1e18 * periods * 100

    Raises:
        ZeroDivisionError: the market holds no liquidity at all.
        UnderflowError: reserves exceed cash + deposit + borrows, or the
            reserve factor exceeds 1e18, or the deposit is negative.
        OverflowError: an intermediate value leaves the 256-bit range.
    """
    if deposit_amount < 0:
        raise UnderflowError(f"deposit amount must be non-negative, got {deposit_amount}")

    s = snapshot
    marginal = fp.div(
        fp.mul(s.total_borrows, s.multiplier_per_period),
        fp.add(fp.add(s.total_borrows, s.available_cash), deposit_amount),
    )
    denominator = fp.sub(
        fp.add(fp.add(s.available_cash, deposit_amount), s.total_borrows),
        s.total_reserves,
    )
    per_period = fp.mul(
        fp.div(fp.add(s.base_rate_per_period, marginal), annualization_constant),
        fp.sub(fp.ONE, s.reserve_factor),
    )
    annual = fp.div(
        fp.div(fp.mul(per_period, s.total_borrows), denominator), fp.ONE
    )
    rate = fp.mul(fp.mul(annual, annualization_constant), fp.PERCENT)

    logger.debug(
        "Projected supply APR %d for deposit %d (borrows=%d cash=%d)",
        rate, deposit_amount, s.total_borrows, s.available_cash,
    )
    return rate


def current_supply_rate(per_period_supply_rate: int, annualization_constant: int) -> int:
    """Annualize the supply rate a market reports for the current period.

    Independent of ``project_supply_rate``; the two can differ by rounding.
    """
    return fp.annualize(per_period_supply_rate, annualization_constant)
