"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, types and helpers
- venue/: Venue configuration and position pricing
- queue/: Sessions, queue items and ordering
- ledger/: User balances and balance transactions
"""

from jukebox_queue.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
