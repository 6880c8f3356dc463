"""Command and handler for refunding a purchased queue position."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.shared.constants import LedgerConstants
from ...domain.shared.exceptions import (
    ItemNotFoundError,
    NotAuthorizedError,
    SessionNotFoundError,
    ValidationError,
    VenueNotFoundError,
)
from ...domain.shared.messages import ErrorMessages
from ...domain.shared.serialization import CamelModel
from ...domain.shared.types import Cents, EntityId, PositiveCents

if TYPE_CHECKING:
    from ...domain.queue.repository import QueueItemRepository, SessionRepository
    from ...domain.venue.repository import VenueRepository


class RefundItemCommand(BaseModel):
    """Host request to return part or all of an item's payment to its buyer.

    Omitting ``amount_cents`` refunds everything not yet refunded.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    item_id: EntityId
    actor_id: EntityId
    amount_cents: PositiveCents | None = None
    description: str = LedgerConstants.REFUND_DESCRIPTION


class RefundItemResult(CamelModel):
    item_id: EntityId
    user_id: EntityId
    refunded_cents: Cents
    balance_after_cents: int


class RefundItemHandler:
    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        venue_repository: VenueRepository,
        item_repository: QueueItemRepository,
    ) -> None:
        self._sessions = session_repository
        self._venues = venue_repository
        self._items = item_repository

    async def handle(self, command: RefundItemCommand) -> RefundItemResult:
        item = await self._items.get(command.item_id)
        if item is None:
            raise ItemNotFoundError(command.item_id)

        session = await self._sessions.get(item.session_id)
        if session is None:
            raise SessionNotFoundError(item.session_id)
        venue = await self._venues.get(session.venue_id)
        if venue is None:
            raise VenueNotFoundError(session.venue_id)
        if not venue.is_hosted_by(command.actor_id):
            raise NotAuthorizedError(command.actor_id, "refund items")

        amount = command.amount_cents or item.refundable_cents
        if amount <= 0:
            raise ValidationError(
                ErrorMessages.NOTHING_TO_REFUND.format(item_id=command.item_id),
                field="amount_cents",
            )

        entry = await self._items.refund(command.item_id, amount, command.description)
        return RefundItemResult(
            item_id=command.item_id,
            user_id=entry.user_id,
            refunded_cents=amount,
            balance_after_cents=entry.balance_after_cents,
        )
