"""Compound-style market family."""
from .adapter import CompoundAdapter
from .rate_model import current_supply_rate, project_supply_rate, read_snapshot
from .reader import CompoundMarketReader

__all__ = [
    "CompoundAdapter",
    "CompoundMarketReader",
    "current_supply_rate",
    "project_supply_rate",
    "read_snapshot",
]
