"""Error taxonomy for adapter operations."""
from __future__ import annotations


class AdapterError(Exception):
    """Base class for adapter failures."""


class ConfigurationError(AdapterError, ValueError):
    """Invalid address, constant or a write-once field set twice."""


class AuthorizationError(AdapterError, PermissionError):
    """The invoking identity is not allowed to perform the operation."""

    def __init__(self, caller: str, operation: str) -> None:
        super().__init__(f"{caller} is not authorized to call {operation}")
        self.caller = caller
        self.operation = operation


class ExternalCallError(AdapterError, RuntimeError):
    """A collaborator (market, token, controller) reported failure."""

    def __init__(self, message: str, status: int | None = None) -> None:
        if status is not None:
            message = f"{message} (status {status})"
        super().__init__(message)
        self.status = status


class ReentrancyError(AdapterError, RuntimeError):
    """A guarded operation was entered while another was in flight."""


class UnderflowError(ArithmeticError):
    """Unsigned subtraction went below zero."""
