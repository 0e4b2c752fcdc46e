"""Uniform adapter over yield-bearing lending markets."""
from .access import AccessGuard, AdapterConfig
from .errors import (
    AdapterError,
    AuthorizationError,
    ConfigurationError,
    ExternalCallError,
    ReentrancyError,
    UnderflowError,
)
from .models import AprQuote, MarketSnapshot, RateCurve

__all__ = [
    "AccessGuard",
    "AdapterConfig",
    "AdapterError",
    "AprQuote",
    "AuthorizationError",
    "ConfigurationError",
    "ExternalCallError",
    "MarketSnapshot",
    "RateCurve",
    "ReentrancyError",
    "UnderflowError",
]
