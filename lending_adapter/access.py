"""Adapter configuration state and the role checks guarding it."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from .errors import AuthorizationError, ConfigurationError

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x" + "0" * 40

# Compound-era mainnet estimate: ~13.3 second blocks.
DEFAULT_BLOCKS_PER_YEAR = 2_371_428


def is_zero_address(address: str | None) -> bool:
    """True for ``None``, an empty string or any all-zero hex address."""
    if not address:
        return True
    body = address[2:] if address.lower().startswith("0x") else address
    return set(body) <= {"0"}


@dataclass(frozen=True)
class AdapterConfig:
    """Persistent adapter settings.

    Instances are never mutated; each administrative change produces a new,
    fully validated config that the adapter swaps in as a single step.
    """

    market_address: str
    underlying_address: str
    admin: str
    authorized_caller: str | None = None
    annualization_constant: int = DEFAULT_BLOCKS_PER_YEAR

    def __post_init__(self) -> None:
        if is_zero_address(self.market_address):
            raise ConfigurationError("market address must be non-zero")
        if is_zero_address(self.underlying_address):
            raise ConfigurationError("underlying address must be non-zero")
        if is_zero_address(self.admin):
            raise ConfigurationError("admin address must be non-zero")
        if self.annualization_constant <= 0:
            raise ConfigurationError("annualization constant must be non-zero")

    def with_authorized_caller(self, caller: str) -> AdapterConfig:
        """Finalize the authorized caller. Allowed exactly once."""
        if self.authorized_caller is not None:
            raise ConfigurationError("authorized caller is already set")
        if is_zero_address(caller):
            raise ConfigurationError("authorized caller must be non-zero")
        return replace(self, authorized_caller=caller)

    def with_annualization_constant(self, value: int) -> AdapterConfig:
        if value <= 0:
            raise ConfigurationError("annualization constant must be non-zero")
        return replace(self, annualization_constant=value)


class AccessGuard:
    """Role predicates over the calling identity."""

    def __init__(self, config_source: Callable[[], AdapterConfig]) -> None:
        self._config_source = config_source

    def is_admin(self, identity: str) -> bool:
        return identity == self._config_source().admin

    def is_authorized_caller(self, identity: str) -> bool:
        caller = self._config_source().authorized_caller
        return caller is not None and identity == caller

    def require_admin(self, identity: str, operation: str) -> None:
        if not self.is_admin(identity):
            logger.warning("Rejected %s from non-admin %s", operation, identity)
            raise AuthorizationError(identity, operation)

    def require_caller(self, identity: str, operation: str) -> None:
        if not self.is_authorized_caller(identity):
            logger.warning("Rejected %s from unauthorized %s", operation, identity)
            raise AuthorizationError(identity, operation)
