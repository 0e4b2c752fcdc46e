"""Rate quoting across configured markets — read-only, never selects a market."""
from __future__ import annotations

import logging
from decimal import Decimal

from ..chains.evm import EvmClient
from ..config import AppConfig, MarketConfig
from ..interfaces.chain import ChainClient
from ..models import AprQuote
from ..protocols.compound import CompoundMarketReader, rate_model

logger = logging.getLogger(__name__)


class RateService:
    """Produces current and projected APR quotes for every configured market."""

    def __init__(
        self,
        config: AppConfig,
        chain_clients: dict[str, ChainClient] | None = None,
    ) -> None:
        self._config = config

        if chain_clients is None:
            chain_clients = {
                name: EvmClient(chain_cfg) for name, chain_cfg in config.chains.items()
            }
        self._chain_clients = chain_clients

        self._readers: dict[str, CompoundMarketReader] = {}
        for name, market_cfg in config.markets.items():
            client = self._chain_clients[market_cfg.chain]
            self._readers[name] = CompoundMarketReader(client, market_cfg.market_address)

    @staticmethod
    def to_base_units(amount: Decimal | int | str, decimals: int) -> int:
        """Whole underlying units -> integer base units, truncating dust."""
        return int(Decimal(amount).scaleb(decimals))

    async def quote(self, name: str, deposit_units: Decimal = Decimal(0)) -> AprQuote:
        """Quote one market for a deposit given in whole underlying units."""
        market_cfg: MarketConfig = self._config.markets[name]
        reader = self._readers[name]
        deposit = self.to_base_units(deposit_units, market_cfg.underlying_decimals)

        snapshot = await reader.fetch_snapshot()
        supply_rate = await reader.fetch_supply_rate()
        exchange_rate = await reader.fetch_exchange_rate()

        return AprQuote(
            market=name,
            current_apr=rate_model.current_supply_rate(
                supply_rate, market_cfg.annualization_constant
            ),
            projected_apr=rate_model.project_supply_rate(
                snapshot, deposit, market_cfg.annualization_constant
            ),
            deposit_amount=deposit,
            available_liquidity=snapshot.available_cash,
            exchange_rate=exchange_rate,
            underlying_decimals=market_cfg.underlying_decimals,
        )

    async def quote_all(self, deposit_units: Decimal = Decimal(0)) -> list[AprQuote]:
        """Quote every market; a market that fails to quote is logged and skipped."""
        quotes: list[AprQuote] = []
        for name in self._config.markets:
            try:
                quotes.append(await self.quote(name, deposit_units))
            except (RuntimeError, ArithmeticError, ValueError) as e:
                logger.error("Could not quote market %s: %s", name, e)
        return quotes
