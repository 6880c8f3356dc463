"""
Ledger Bounded Context

User balances and the append-only record of debits and credits.
"""

from jukebox_queue.domain.ledger.entities import (
    BalanceTransaction,
    Payment,
    ReconciliationReport,
    TransactionType,
    User,
)
from jukebox_queue.domain.ledger.repository import LedgerRepository
from jukebox_queue.domain.ledger.services import LedgerDomainService, LedgerReplay

__all__ = [
    # Entities
    "User",
    "BalanceTransaction",
    "TransactionType",
    "Payment",
    "ReconciliationReport",
    # Repository
    "LedgerRepository",
    # Services
    "LedgerDomainService",
    "LedgerReplay",
]
