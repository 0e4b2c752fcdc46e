"""Protocol interfaces for the lending adapter."""
from .chain import ChainClient
from .lending_adapter import LendingAdapter
from .market import CompoundMarket
from .rewards import ContractResolver, RewardController
from .token import Token

__all__ = [
    "ChainClient",
    "CompoundMarket",
    "ContractResolver",
    "LendingAdapter",
    "RewardController",
    "Token",
]
