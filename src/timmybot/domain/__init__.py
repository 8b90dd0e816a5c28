"""
Domain Layer

Contains pure business rules organized by bounded contexts:
- shared/: Cross-cutting types, messages, and exceptions
- queue/: Per-guild queue entries and the queue store contract
- access/: Guild allowlist entries and their repository contract
"""

from timmybot.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
