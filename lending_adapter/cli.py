"""Command-line interface for the lending adapter tooling."""
from __future__ import annotations

import argparse
import asyncio
import sys
from decimal import Decimal, InvalidOperation

from .config import load_config
from .fixed_point import ONE
from .logging_setup import configure_logging
from .models import AprQuote
from .services import RateService


def _amount(value: str) -> Decimal:
    """Parse a deposit amount exactly, as a non-negative ``Decimal``."""
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}") from None
    if not amount.is_finite() or amount < 0:
        raise argparse.ArgumentTypeError(f"amount must be a non-negative number: {value!r}")
    return amount


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="lending-adapter",
        description="Quote supply rates of configured lending markets",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    rates_parser = sub.add_parser(
        "rates", help="Current and projected APR of every configured market"
    )
    rates_parser.add_argument(
        "--amount",
        type=_amount,
        default=Decimal(0),
        help="Hypothetical deposit in whole underlying units (default: 0)",
    )

    return parser


def format_quote(quote: AprQuote) -> str:
    """One aligned line per market; rates as percentages, liquidity in whole units."""
    unit = 10**quote.underlying_decimals
    return (
        f"{quote.market:<12} "
        f"current {quote.current_apr / ONE:>8.4f}%  "
        f"projected {quote.projected_apr / ONE:>8.4f}%  "
        f"liquidity {quote.available_liquidity / unit:>16,.2f}  "
        f"exchange rate {quote.exchange_rate}"
    )


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    if args.command == "rates":
        quotes = await RateService(config).quote_all(args.amount)
        for quote in quotes:
            print(format_quote(quote))
        return 0 if len(quotes) == len(config.markets) else 1

    build_parser().print_help()
    return 1


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
