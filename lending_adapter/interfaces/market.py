"""Market protocol — the Compound-style lending pool an adapter wraps."""
from typing import Protocol

from ..models import RateCurve
from .token import Token


class CompoundMarket(Token, Protocol):
    """Abstract interface for a Compound-style market.

    The market is also the ledger of its own share token. Mutating calls
    report a status code; ``0`` means success.
    """

    def deposit_and_mint_shares(self, minter: str, amount: int) -> int: ...

    def redeem_shares_for_underlying(self, redeemer: str, share_amount: int) -> int: ...

    def share_to_underlying_exchange_rate(self) -> int: ...

    def per_period_supply_rate(self) -> int: ...

    def available_cash(self) -> int: ...

    def total_borrows(self) -> int: ...

    def total_reserves(self) -> int: ...

    def reserve_factor_fraction(self) -> int: ...

    def rate_curve_parameters(self) -> RateCurve: ...

    def reward_controller_address(self) -> str: ...
