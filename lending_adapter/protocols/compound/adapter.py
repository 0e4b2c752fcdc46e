"""Compound-style lending adapter — wraps one market behind the uniform interface."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from ...access import (
    DEFAULT_BLOCKS_PER_YEAR,
    AccessGuard,
    AdapterConfig,
    is_zero_address,
)
from ...errors import ConfigurationError, ExternalCallError, ReentrancyError
from ...fixed_point import MAX_UINT256
from ...interfaces.market import CompoundMarket
from ...interfaces.rewards import ContractResolver
from ...interfaces.token import Token
from ...models import MarketSnapshot
from . import rate_model

logger = logging.getLogger(__name__)

_SUCCESS = 0


class CompoundAdapter:
    """Deposit into and quote a Compound-style market on behalf of one caller.

    The adapter holds funds only for the duration of a single call: the
    caller pushes underlying (or share) tokens in, then calls ``mint`` (or
    ``redeem``), which forwards everything onwards before returning.
    """

    def __init__(
        self,
        address: str,
        market: CompoundMarket,
        underlying: Token,
        admin: str,
        resolver: ContractResolver,
        annualization_constant: int = DEFAULT_BLOCKS_PER_YEAR,
    ) -> None:
        if is_zero_address(address):
            raise ConfigurationError("adapter address must be non-zero")

        self._config = AdapterConfig(
            market_address=market.address,
            underlying_address=underlying.address,
            admin=admin,
            annualization_constant=annualization_constant,
        )
        self._guard = AccessGuard(lambda: self._config)
        self._address = address
        self._market = market
        self._underlying = underlying
        self._resolver = resolver
        self._entered = False

        if not underlying.approve(address, market.address, MAX_UINT256):
            raise ExternalCallError("underlying approval to market failed")
        logger.info(
            "Compound adapter %s wraps market %s (underlying %s)",
            address, market.address, underlying.address,
        )

    @property
    def market_family(self) -> str:
        return "compound"

    @property
    def address(self) -> str:
        return self._address

    @property
    def config(self) -> AdapterConfig:
        return self._config

    # ------------------------------------------------------------------
    # Call boundary
    # ------------------------------------------------------------------

    @contextmanager
    def _non_reentrant(self, operation: str) -> Iterator[None]:
        if self._entered:
            raise ReentrancyError(f"re-entrant call to {operation}")
        self._entered = True
        try:
            yield
        finally:
            self._entered = False

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def set_authorized_caller(self, sender: str, caller: str) -> None:
        """Finalize the single identity allowed to mint, redeem and harvest."""
        with self._non_reentrant("set_authorized_caller"):
            self._guard.require_admin(sender, "set_authorized_caller")
            self._config = self._config.with_authorized_caller(caller)
        logger.info("Authorized caller set to %s", caller)

    def set_annualization_constant(self, sender: str, value: int) -> None:
        with self._non_reentrant("set_annualization_constant"):
            self._guard.require_admin(sender, "set_annualization_constant")
            self._config = self._config.with_annualization_constant(value)
        logger.info("Annualization constant set to %d", value)

    # ------------------------------------------------------------------
    # Read-through
    # ------------------------------------------------------------------

    def current_price_in_share_token(self) -> int:
        return self._market.share_to_underlying_exchange_rate()

    def current_apr(self) -> int:
        return rate_model.current_supply_rate(
            self._market.per_period_supply_rate(),
            self._config.annualization_constant,
        )

    def snapshot(self) -> MarketSnapshot:
        return rate_model.read_snapshot(self._market)

    def projected_apr(self, deposit_amount: int) -> int:
        return rate_model.project_supply_rate(
            self.snapshot(), deposit_amount, self._config.annualization_constant
        )

    def available_liquidity(self) -> int:
        return self._market.available_cash()

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def mint(self, caller: str) -> int:
        """Deposit the adapter's whole underlying balance, pass shares to caller.

        Returns the number of shares forwarded; ``0`` when the adapter was
        not funded, in which case nothing is called on the market.

        If the shares cannot be forwarded they are redeemed again and the
        underlying goes back to ``caller`` before the error is re-raised.
        """
        with self._non_reentrant("mint"):
            self._guard.require_caller(caller, "mint")

            balance = self._underlying.balance_of(self._address)
            if balance == 0:
                logger.debug("mint called on unfunded adapter, nothing to do")
                return 0

            status = self._market.deposit_and_mint_shares(self._address, balance)
            if status != _SUCCESS:
                raise ExternalCallError("market rejected deposit", status)

            shares = self._market.balance_of(self._address)
            try:
                self._forward(self._market, caller, shares, "share")
            except ExternalCallError:
                self._unwind_mint(caller, shares)
                raise

        logger.info("Minted %d shares for %s from %d underlying", shares, caller, balance)
        return shares

    def redeem(self, caller: str, recipient: str) -> int:
        """Redeem the adapter's whole share balance, pay underlying to recipient.

        If the underlying cannot be paid out it is deposited again and the
        fresh shares go back to ``caller`` before the error is re-raised.
        """
        with self._non_reentrant("redeem"):
            self._guard.require_caller(caller, "redeem")
            if is_zero_address(recipient):
                raise ConfigurationError("redeem recipient must be non-zero")

            shares = self._market.balance_of(self._address)
            if shares == 0:
                logger.debug("redeem called with no shares held, nothing to do")
                return 0

            status = self._market.redeem_shares_for_underlying(self._address, shares)
            if status != _SUCCESS:
                raise ExternalCallError("market rejected redeem", status)

            redeemed = self._underlying.balance_of(self._address)
            try:
                self._forward(self._underlying, recipient, redeemed, "underlying")
            except ExternalCallError:
                self._unwind_redeem(caller, redeemed)
                raise

        logger.info("Redeemed %d shares for %d underlying to %s", shares, redeemed, recipient)
        return redeemed

    def harvest_rewards(self, caller: str) -> None:
        """Claim supply-side rewards for ``caller``.

        Rewards accrue to the caller's own address, never to the adapter, so
        the caller must hold the shares it wants rewards for.
        """
        with self._non_reentrant("harvest_rewards"):
            self._guard.require_caller(caller, "harvest_rewards")
            controller = self._resolver.reward_controller(
                self._market.reward_controller_address()
            )
            controller.claim_rewards_for([caller], [self._market.address], False, True)
        logger.info("Harvested rewards for %s on %s", caller, self._market.address)

    def _forward(self, token: Token, recipient: str, amount: int, kind: str) -> None:
        if not token.transfer(self._address, recipient, amount):
            raise ExternalCallError(f"{kind} transfer to {recipient} failed")

    def _unwind_mint(self, caller: str, shares: int) -> None:
        logger.warning("Share transfer to %s failed, redeeming %d shares back", caller, shares)
        status = self._market.redeem_shares_for_underlying(self._address, shares)
        if status != _SUCCESS:
            raise ExternalCallError("could not unwind mint", status)
        refund = self._underlying.balance_of(self._address)
        self._forward(self._underlying, caller, refund, "underlying")

    def _unwind_redeem(self, caller: str, underlying: int) -> None:
        logger.warning("Underlying transfer failed, re-depositing %d for %s", underlying, caller)
        status = self._market.deposit_and_mint_shares(self._address, underlying)
        if status != _SUCCESS:
            raise ExternalCallError("could not unwind redeem", status)
        shares = self._market.balance_of(self._address)
        self._forward(self._market, caller, shares, "share")
