"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidParametersError(DomainError):
    """Raised when a command is invoked with missing or malformed parameters."""

    def __init__(self, message: str, parameter: str | None = None) -> None:
        super().__init__(message, code="INVALID_PARAMETERS")
        self.parameter = parameter


class StoreUnavailableError(DomainError):
    """Raised when a persistent store fails or does not answer in time."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        msg = message or f"Store unavailable during '{operation}'"
        super().__init__(msg, code="STORE_UNAVAILABLE")
        self.operation = operation


class ConcurrencyError(DomainError):
    """Raised when a concurrent modification conflict occurs."""

    def __init__(self, entity_type: str, message: str | None = None) -> None:
        msg = message or f"Concurrent modification detected for {entity_type}"
        super().__init__(msg, code="CONCURRENCY_ERROR")
        self.entity_type = entity_type
