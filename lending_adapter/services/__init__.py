"""Service modules"""
from .rates import RateService

__all__ = ["RateService"]
