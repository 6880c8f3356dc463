"""Command and handler for submitting a song, optionally buying a queue position."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, model_validator

from ...domain.ledger.entities import Payment
from ...domain.queue import ordering
from ...domain.queue.entities import QueueItem
from ...domain.queue.services import QueueDomainService
from ...domain.queue.value_objects import CatalogTrack, DesiredPositionField
from ...domain.shared.constants import LedgerConstants
from ...domain.shared.datetime_utils import utcnow
from ...domain.shared.exceptions import (
    InsufficientBalanceError,
    InsufficientPaymentError,
    SessionNotFoundError,
    UserNotFoundError,
    VenueNotFoundError,
)
from ...domain.shared.messages import LogTemplates
from ...domain.shared.money import format_cents
from ...domain.shared.serialization import CamelModel
from ...domain.shared.types import Cents, EntityId, NonEmptyStr, TrackTitleStr
from ..services.queue_models import QueueItemView

if TYPE_CHECKING:
    from ...domain.ledger.repository import LedgerRepository
    from ...domain.queue.repository import QueueItemRepository, SessionRepository
    from ...domain.venue.pricing import PricingPolicy
    from ...domain.venue.repository import VenueRepository

logger = logging.getLogger(__name__)


class SubmitItemCommand(BaseModel):
    """Request to add a song to a session's queue.

    Leaving ``desired_position`` unset submits an organic, free request.
    Setting it buys that position at the current quote.
    """

    model_config = ConfigDict(frozen=True)

    session_id: EntityId
    user_id: EntityId
    title: TrackTitleStr | None = None
    artist: NonEmptyStr | None = None
    track: CatalogTrack | None = None
    desired_position: DesiredPositionField | None = None
    paid_amount_cents: Cents | None = None

    @model_validator(mode="after")
    def _require_title(self) -> SubmitItemCommand:
        if self.track is None and self.title is None:
            raise ValueError("Either a catalog track or a title is required")
        return self


class SubmitItemResult(CamelModel):
    """Outcome of a successful submission."""

    item: QueueItemView
    quoted_price_cents: Cents
    charged_cents: Cents
    charged_display: str
    balance_after_cents: int | None = None
    display_position: int | None = None


class SubmitItemHandler:
    """Quotes, charges and stores a queue item as one all-or-nothing step."""

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        venue_repository: VenueRepository,
        item_repository: QueueItemRepository,
        ledger_repository: LedgerRepository,
        pricing_policy: PricingPolicy,
        debit_description: str = LedgerConstants.DEBIT_DESCRIPTION,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._sessions = session_repository
        self._venues = venue_repository
        self._items = item_repository
        self._ledger = ledger_repository
        self._pricing = pricing_policy
        self._debit_description = debit_description
        self._clock = clock

    async def handle(self, command: SubmitItemCommand) -> SubmitItemResult:
        session = await self._sessions.get(command.session_id)
        if session is None:
            raise SessionNotFoundError(command.session_id)
        session.ensure_open("submit_item")

        user = await self._ledger.get_user(command.user_id)
        if user is None:
            raise UserNotFoundError(command.user_id)

        venue = await self._venues.get(session.venue_id)
        if venue is None:
            raise VenueNotFoundError(session.venue_id)

        pending = await self._items.list_pending(command.session_id)
        unplayed = len(pending)

        quote = 0
        payment: Payment | None = None
        position: int | None = None

        if command.desired_position is not None:
            position = QueueDomainService.resolve_position(command.desired_position, pending)
            quote = self._pricing.price(venue, position, now=self._clock(), queue_length=unplayed)

            if command.paid_amount_cents is not None and command.paid_amount_cents < quote:
                logger.info(
                    LogTemplates.PAYMENT_REJECTED,
                    command.session_id,
                    command.paid_amount_cents,
                    quote,
                )
                raise InsufficientPaymentError(command.paid_amount_cents, quote)
            if not user.can_afford(quote):
                raise InsufficientBalanceError(user.id, quote, user.balance_cents)

            payment = Payment(
                user_id=user.id, amount_cents=quote, description=self._debit_description
            )

        request_fields = {
            "user_id": user.id,
            "user_display_name": user.display_name,
            "base_priority": QueueDomainService.ORGANIC_PRIORITY,
            "position_paid_cents": quote,
            "inserted_at_position": position,
            "position_guaranteed": position is not None,
        }
        if command.track is not None:
            item = QueueItem.from_catalog(command.session_id, command.track, **request_fields)
        else:
            item = QueueItem(
                session_id=command.session_id,
                title=command.title,
                artist=command.artist,
                **request_fields,
            )

        stored, entry = await self._items.add(item, payment, place_at=position)
        logger.info(
            LogTemplates.ITEM_SUBMITTED,
            stored.id,
            stored.title,
            command.session_id,
            stored.base_priority,
            quote,
        )

        pending = await self._items.list_pending(command.session_id)
        current_position = ordering.display_position(stored.id, pending)
        return SubmitItemResult(
            item=QueueItemView.from_item(stored, position=current_position),
            quoted_price_cents=quote,
            charged_cents=quote,
            charged_display=format_cents(quote),
            balance_after_cents=entry.balance_after_cents if entry else user.balance_cents,
            display_position=current_position,
        )
