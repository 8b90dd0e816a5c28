"""
Shared Domain Kernel

Contains types, message constants, and exceptions shared across all bounded contexts.
"""

from timmybot.domain.shared.exceptions import (
    ConcurrencyError,
    DomainError,
    InvalidParametersError,
    StoreUnavailableError,
)

__all__ = [
    "ConcurrencyError",
    "DomainError",
    "InvalidParametersError",
    "StoreUnavailableError",
]
