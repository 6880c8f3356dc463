"""Ledger Application Service - wallets, debits, credits and reconciliation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.ledger.entities import (
    BalanceTransaction,
    ReconciliationReport,
    TransactionType,
    User,
)
from ...domain.ledger.services import LedgerDomainService
from ...domain.shared.constants import LedgerConstants
from ...domain.shared.exceptions import UserNotFoundError, ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.ledger.repository import LedgerRepository

logger = logging.getLogger(__name__)


class LedgerApplicationService:
    """Opens wallets and moves money in and out of them."""

    def __init__(
        self,
        *,
        ledger_repository: LedgerRepository,
        initial_balance_cents: int = LedgerConstants.INITIAL_BALANCE_CENTS,
        initial_description: str = LedgerConstants.INITIAL_DESCRIPTION,
        debit_description: str = LedgerConstants.DEBIT_DESCRIPTION,
        refund_description: str = LedgerConstants.REFUND_DESCRIPTION,
    ) -> None:
        if initial_balance_cents < 0:
            raise ValidationError(
                ErrorMessages.INITIAL_BALANCE_NEGATIVE, field="initial_balance_cents"
            )
        self._ledger = ledger_repository
        self._initial_balance_cents = initial_balance_cents
        self._initial_description = initial_description
        self._debit_description = debit_description
        self._refund_description = refund_description

    async def open_account(self, display_name: str) -> User:
        """Create a user funded with the welcome balance."""
        return await self._ledger.create_user(
            display_name, self._initial_balance_cents, self._initial_description
        )

    async def get_user(self, user_id: int) -> User:
        user = await self._ledger.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def debit(
        self,
        user_id: int,
        amount_cents: int,
        description: str | None = None,
        queue_item_id: int | None = None,
    ) -> BalanceTransaction:
        LedgerDomainService.validate_amount(amount_cents)
        return await self._ledger.debit(
            user_id, amount_cents, description or self._debit_description, queue_item_id
        )

    async def credit(
        self,
        user_id: int,
        amount_cents: int,
        description: str | None = None,
        queue_item_id: int | None = None,
        transaction_type: TransactionType = TransactionType.REFUND,
    ) -> BalanceTransaction:
        LedgerDomainService.validate_amount(amount_cents)
        return await self._ledger.credit(
            user_id,
            amount_cents,
            transaction_type,
            description or self._refund_description,
            queue_item_id,
        )

    async def history(self, user_id: int) -> list[BalanceTransaction]:
        await self.get_user(user_id)
        return await self._ledger.list_transactions(user_id)

    async def reconcile(self, user_id: int) -> ReconciliationReport:
        """Replay the user's ledger and compare it with the stored balance."""
        user = await self.get_user(user_id)
        transactions = await self._ledger.list_transactions(user_id)
        replay = LedgerDomainService.replay(transactions)

        report = ReconciliationReport(
            user_id=user_id,
            stored_balance_cents=user.balance_cents,
            derived_balance_cents=replay.derived_balance_cents,
            transaction_count=replay.transaction_count,
            mismatched_transaction_ids=replay.mismatched_transaction_ids,
        )
        if not report.consistent:
            logger.error(
                LogTemplates.LEDGER_RECONCILE_MISMATCH,
                user_id,
                report.stored_balance_cents,
                report.derived_balance_cents,
            )
        return report
