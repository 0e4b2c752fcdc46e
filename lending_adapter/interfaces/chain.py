"""Chain client protocol — blockchain RPC abstraction."""
from typing import Awaitable, Callable, Protocol, TypeVar

from web3 import AsyncWeb3

T = TypeVar("T")


class ChainClient(Protocol):
    """Abstract interface for read-only EVM access."""

    async def call(self, read: Callable[[AsyncWeb3], Awaitable[T]]) -> T: ...
