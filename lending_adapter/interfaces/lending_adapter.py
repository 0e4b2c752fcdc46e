"""Lending adapter — the uniform interface an aggregator talks to."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class LendingAdapter(Protocol):
    """Capability set shared by every market-family adapter.

    Read operations never change state. Mutating operations take the
    invoking identity first and are restricted to the authorized caller.
    """

    @property
    def market_family(self) -> str: ...

    def current_price_in_share_token(self) -> int: ...

    def current_apr(self) -> int: ...

    def projected_apr(self, deposit_amount: int) -> int: ...

    def available_liquidity(self) -> int: ...

    def mint(self, caller: str) -> int: ...

    def redeem(self, caller: str, recipient: str) -> int: ...

    def harvest_rewards(self, caller: str) -> None: ...
