"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .access import DEFAULT_BLOCKS_PER_YEAR, is_zero_address
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_FAMILIES = ("compound",)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChainConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30


@dataclass(frozen=True)
class MarketConfig:
    family: str = "compound"
    chain: str = ""
    market_address: str = ""
    underlying_address: str = ""
    underlying_decimals: int = 18
    annualization_constant: int = DEFAULT_BLOCKS_PER_YEAR


@dataclass(frozen=True)
class AppConfig:
    chains: dict[str, ChainConfig] = field(default_factory=dict)
    markets: dict[str, MarketConfig] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_chains(raw: dict[str, Any]) -> dict[str, ChainConfig]:
    chains: dict[str, ChainConfig] = {}
    for name, cfg in raw.items():
        # Interpolated-away endpoints (unset env vars) are dropped.
        endpoints = tuple(e for e in cfg.get("rpc_endpoints", []) if e)
        chains[name] = ChainConfig(
            rpc_endpoints=endpoints,
            rpc_timeout=int(cfg.get("rpc_timeout", 30)),
        )
    return chains


def _address(value: Any) -> str:
    """Unquoted hex addresses come back from YAML as integers."""
    if isinstance(value, int):
        return f"0x{value:040x}"
    return str(value or "")


def _build_markets(raw: dict[str, Any]) -> dict[str, MarketConfig]:
    markets: dict[str, MarketConfig] = {}
    for name, cfg in raw.items():
        markets[name] = MarketConfig(
            family=cfg.get("family", "compound"),
            chain=cfg.get("chain", ""),
            market_address=_address(cfg.get("market_address")),
            underlying_address=_address(cfg.get("underlying_address")),
            underlying_decimals=int(cfg.get("underlying_decimals", 18)),
            annualization_constant=int(
                cfg.get("annualization_constant", DEFAULT_BLOCKS_PER_YEAR)
            ),
        )
    return markets


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        chains=_build_chains(raw.get("chains", {})),
        markets=_build_markets(raw.get("markets", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise ConfigurationError on invalid configuration."""
    if not cfg.markets:
        raise ConfigurationError("At least one market must be configured")

    for name, market in cfg.markets.items():
        if market.family not in SUPPORTED_FAMILIES:
            raise ConfigurationError(
                f"Market '{name}' has unsupported family '{market.family}'"
            )
        if market.chain not in cfg.chains:
            raise ConfigurationError(
                f"Market '{name}' references unknown chain '{market.chain}'"
            )
        if is_zero_address(market.market_address):
            raise ConfigurationError(f"Market '{name}' has no market address")
        if is_zero_address(market.underlying_address):
            raise ConfigurationError(f"Market '{name}' has no underlying address")
        if market.annualization_constant <= 0:
            raise ConfigurationError(
                f"Market '{name}' annualization constant must be non-zero"
            )
