"""Pure ledger rules."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from jukebox_queue.domain.ledger.entities import BalanceTransaction
from jukebox_queue.domain.shared.exceptions import ValidationError
from jukebox_queue.domain.shared.messages import ErrorMessages


@dataclass(frozen=True)
class LedgerReplay:
    derived_balance_cents: int
    transaction_count: int
    mismatched_transaction_ids: tuple[int, ...]


class LedgerDomainService:
    """Stateless checks and folds over ledger entries."""

    @staticmethod
    def validate_amount(amount_cents: int) -> None:
        if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents <= 0:
            raise ValidationError(ErrorMessages.AMOUNT_MUST_BE_POSITIVE, field="amount_cents")

    @staticmethod
    def replay(
        transactions: Iterable[BalanceTransaction], opening_balance_cents: int = 0
    ) -> LedgerReplay:
        """Fold entries in order, checking each recorded ``balance_after_cents``.

        Args:
            transactions: A user's entries in insertion order.
            opening_balance_cents: Balance before the first entry.

        Returns:
            The derived balance and the ids of entries whose recorded balance
            disagrees with the running total.
        """
        balance = opening_balance_cents
        mismatched: list[int] = []
        count = 0
        for tx in transactions:
            balance += tx.amount_cents
            count += 1
            if tx.balance_after_cents != balance:
                mismatched.append(tx.id)
        return LedgerReplay(
            derived_balance_cents=balance,
            transaction_count=count,
            mismatched_transaction_ids=tuple(mismatched),
        )
