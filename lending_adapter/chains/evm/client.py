"""EVM client — web3 providers over aiohttp with endpoint fallback."""
import asyncio
import logging
import ssl
from typing import Awaitable, Callable, TypeVar

import aiohttp
import certifi
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import Web3Exception

from ...config import ChainConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures that mean "try the next endpoint" rather than "the read is wrong".
_ENDPOINT_ERRORS = (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError, OSError)


class EvmClient:
    """One ``AsyncWeb3`` per configured endpoint, used in order until one answers."""

    def __init__(self, config: ChainConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        request_kwargs = {
            "timeout": aiohttp.ClientTimeout(total=self.timeout),
            "ssl": ssl_context,
        }
        self._web3s = [
            AsyncWeb3(AsyncHTTPProvider(url, request_kwargs=request_kwargs))
            for url in self.endpoints
        ]

    async def call(self, read: Callable[[AsyncWeb3], Awaitable[T]]) -> T:
        """Run ``read`` against the current endpoint, falling back on failure."""
        if not self._web3s:
            raise RuntimeError("No RPC endpoints configured")

        last_error: Exception | None = None
        for attempt in range(len(self._web3s)):
            rpc_index = (self.current_rpc_index + attempt) % len(self._web3s)
            rpc_url = self.endpoints[rpc_index]

            try:
                result = await read(self._web3s[rpc_index])
            except _ENDPOINT_ERRORS as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)
                continue

            if rpc_index != self.current_rpc_index:
                logger.info("Switched to RPC endpoint: %s", rpc_url)
                self.current_rpc_index = rpc_index
            return result

        raise RuntimeError(f"All RPC endpoints failed. Last error: {last_error}")
