"""Query and handler for a session's queue as guests see it."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.queue import ordering
from ...domain.queue.services import QueueDomainService
from ...domain.queue.value_objects import SessionStatus
from ...domain.shared.datetime_utils import utcnow
from ...domain.shared.exceptions import SessionNotFoundError, VenueNotFoundError
from ...domain.shared.serialization import CamelModel
from ...domain.shared.types import EntityId, NonNegativeInt
from ..services.queue_models import QueueItemView

if TYPE_CHECKING:
    from ...domain.queue.repository import QueueItemRepository, SessionRepository
    from ...domain.venue.pricing import PricingPolicy
    from ...domain.venue.repository import VenueRepository


class GetQueueQuery(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    session_id: EntityId


class QueueView(CamelModel):
    """Now playing, the displayed queue, and what plays next."""

    session_id: EntityId
    status: SessionStatus
    join_code: str
    now_playing: QueueItemView | None = None
    items: list[QueueItemView]
    up_next: QueueItemView | None = None
    songs_count: NonNegativeInt


class GetQueueHandler:
    """Builds the guest queue view.

    Each displayed item carries the price of jumping ahead of it: the quote
    for the slot a purchase aimed at that item would actually receive.
    """

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        venue_repository: VenueRepository,
        item_repository: QueueItemRepository,
        pricing_policy: PricingPolicy,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._sessions = session_repository
        self._venues = venue_repository
        self._items = item_repository
        self._pricing = pricing_policy
        self._clock = clock

    async def handle(self, query: GetQueueQuery) -> QueueView:
        session = await self._sessions.get(query.session_id)
        if session is None:
            raise SessionNotFoundError(query.session_id)
        venue = await self._venues.get(session.venue_id)
        if venue is None:
            raise VenueNotFoundError(session.venue_id)

        pending = await self._items.list_pending(query.session_id)
        current = await self._items.get_current(query.session_id)
        head = ordering.next_up(pending)
        now = self._clock()

        displayed = [
            QueueItemView.from_item(
                item,
                position=index,
                was_bumped=QueueDomainService.was_bumped(item, pending),
                jump_ahead_price_cents=self._pricing.price(
                    venue,
                    QueueDomainService.resolve_position(index, pending),
                    now=now,
                    queue_length=len(pending),
                ),
            )
            for index, item in enumerate(ordering.by_position(pending), start=1)
        ]

        return QueueView(
            session_id=query.session_id,
            status=session.status,
            join_code=session.join_code,
            now_playing=QueueItemView.from_item(current) if current else None,
            items=displayed,
            up_next=next((view for view in displayed if head and view.id == head.id), None),
            songs_count=len(pending),
        )
