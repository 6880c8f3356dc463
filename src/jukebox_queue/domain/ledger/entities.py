"""Ledger entities: wallet owners and their immutable balance transactions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from jukebox_queue.domain.shared.constants import LedgerConstants
from jukebox_queue.domain.shared.datetime_utils import utcnow
from jukebox_queue.domain.shared.money import format_cents
from jukebox_queue.domain.shared.types import (
    Cents,
    DisplayNameStr,
    EntityId,
    NonEmptyStr,
    PositiveCents,
    UtcDatetimeField,
)


class TransactionType(Enum):
    """Kinds of ledger entries.

    Debits carry a negative amount; refunds and initial credits a positive one.
    """

    DEBIT = "debit"
    REFUND = "refund"
    INITIAL = "initial"

    @property
    def is_credit(self) -> bool:
        return self is not TransactionType.DEBIT


class User(BaseModel):
    """Wallet owner.

    ``balance_cents`` never goes below zero; the floor is enforced when a
    debit is applied, not by the model.
    """

    model_config = ConfigDict(frozen=True)

    id: EntityId
    display_name: DisplayNameStr
    balance_cents: int = 0
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def balance_display(self) -> str:
        return format_cents(self.balance_cents)

    def can_afford(self, amount_cents: int) -> bool:
        return amount_cents <= self.balance_cents


class BalanceTransaction(BaseModel):
    """Immutable, append-only ledger entry."""

    model_config = ConfigDict(frozen=True)

    id: EntityId
    user_id: EntityId
    amount_cents: int
    transaction_type: TransactionType
    balance_after_cents: int
    description: str = ""
    queue_item_id: EntityId | None = None
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def amount_display(self) -> str:
        return format_cents(self.amount_cents)


class Payment(BaseModel):
    """A debit to apply together with another write (e.g. a queue purchase)."""

    model_config = ConfigDict(frozen=True)

    user_id: EntityId
    amount_cents: PositiveCents
    description: NonEmptyStr = LedgerConstants.DEBIT_DESCRIPTION


class ReconciliationReport(BaseModel):
    """Outcome of replaying a user's ledger against the stored balance."""

    model_config = ConfigDict(frozen=True)

    user_id: EntityId
    stored_balance_cents: int
    derived_balance_cents: int
    transaction_count: Cents
    mismatched_transaction_ids: tuple[int, ...] = ()

    @property
    def consistent(self) -> bool:
        return (
            self.stored_balance_cents == self.derived_balance_cents
            and not self.mismatched_transaction_ids
        )
