from .client import EvmClient

__all__ = ["EvmClient"]
