"""Token protocol — balance ledger of an asset or share token."""
from typing import Protocol


class Token(Protocol):
    """Abstract interface for a fungible token ledger."""

    @property
    def address(self) -> str: ...

    def balance_of(self, account: str) -> int: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...
