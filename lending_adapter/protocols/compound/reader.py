"""Compound market reader — fetches market state through web3 contract calls."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from web3 import AsyncWeb3, Web3

from ...interfaces.chain import ChainClient
from ...models import MarketSnapshot

logger = logging.getLogger(__name__)


def _view(name: str, output_type: str = "uint256") -> dict[str, Any]:
    return {
        "name": name,
        "inputs": [],
        "outputs": [{"name": "", "type": output_type}],
        "stateMutability": "view",
        "type": "function",
    }


# Minimal ABIs, only the view functions read here.
CTOKEN_ABI = [
    _view("totalBorrows"),
    _view("getCash"),
    _view("totalReserves"),
    _view("reserveFactorMantissa"),
    _view("supplyRatePerBlock"),
    _view("exchangeRateStored"),
    _view("interestRateModel", "address"),
]

RATE_MODEL_ABI = [
    _view("baseRatePerBlock"),
    _view("multiplierPerBlock"),
]


class CompoundMarketReader:
    """Read-only view of a live Compound-style market."""

    def __init__(self, chain_client: ChainClient, market_address: str) -> None:
        self._client = chain_client
        self._market = Web3.to_checksum_address(market_address)
        self._rate_model_address: str | None = None

    @property
    def market_address(self) -> str:
        return self._market

    async def _read(self, address: str, abi: list[dict[str, Any]], function: str) -> Any:
        async def read(w3: AsyncWeb3) -> Any:
            contract = w3.eth.contract(address=address, abi=abi)
            return await getattr(contract.functions, function)().call()

        return await self._client.call(read)

    async def rate_model_address(self) -> str:
        """Address of the market's interest-rate model (cached)."""
        if self._rate_model_address is None:
            self._rate_model_address = await self._read(
                self._market, CTOKEN_ABI, "interestRateModel"
            )
        return self._rate_model_address

    async def fetch_snapshot(self) -> MarketSnapshot:
        model = await self.rate_model_address()
        borrows, cash, reserves, reserve_factor, base, multiplier = await asyncio.gather(
            self._read(self._market, CTOKEN_ABI, "totalBorrows"),
            self._read(self._market, CTOKEN_ABI, "getCash"),
            self._read(self._market, CTOKEN_ABI, "totalReserves"),
            self._read(self._market, CTOKEN_ABI, "reserveFactorMantissa"),
            self._read(model, RATE_MODEL_ABI, "baseRatePerBlock"),
            self._read(model, RATE_MODEL_ABI, "multiplierPerBlock"),
        )
        logger.debug(
            "Market %s: borrows=%d cash=%d reserves=%d",
            self._market, borrows, cash, reserves,
        )
        return MarketSnapshot(
            total_borrows=borrows,
            available_cash=cash,
            total_reserves=reserves,
            reserve_factor=reserve_factor,
            base_rate_per_period=base,
            multiplier_per_period=multiplier,
        )

    async def fetch_supply_rate(self) -> int:
        return await self._read(self._market, CTOKEN_ABI, "supplyRatePerBlock")

    async def fetch_exchange_rate(self) -> int:
        return await self._read(self._market, CTOKEN_ABI, "exchangeRateStored")
