"""Pricing queries: the JSON contracts polled by clients.

- ``current_prices``: quotes for positions 1..N plus the factors of position 1.
- ``position_price``: one position's quote with its factors.
- ``factors``: the factor breakdown alone.

Quotes are pure reads of venue configuration and the unplayed count; no
locks are taken and a slightly stale count only changes the number shown.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from ...domain.queue.entities import QueueSession
from ...domain.shared.constants import PricingConstants
from ...domain.shared.datetime_utils import utcnow
from ...domain.shared.exceptions import (
    InvalidPositionError,
    SessionNotFoundError,
    VenueNotFoundError,
)
from ...domain.shared.money import format_cents
from ...domain.shared.serialization import CamelModel
from ...domain.shared.types import Cents, EntityId, QueuePositionInt
from ...domain.venue.pricing import PricingFactors

if TYPE_CHECKING:
    from ...domain.queue.repository import QueueItemRepository, SessionRepository
    from ...domain.venue.entities import Venue
    from ...domain.venue.pricing import PricingPolicy
    from ...domain.venue.repository import VenueRepository


class PositionQuote(CamelModel):
    position: QueuePositionInt
    price_cents: Cents
    price_display: str

    @classmethod
    def of(cls, position: int, price_cents: int) -> PositionQuote:
        return cls(
            position=position, price_cents=price_cents, price_display=format_cents(price_cents)
        )


class PositionPriceView(PositionQuote):
    factors: PricingFactors


class CurrentPricesView(CamelModel):
    session_id: EntityId
    positions: list[PositionQuote]
    factors: PricingFactors


def parse_position(value: int | str) -> int:
    """Parse a position parameter, rejecting non-integers and values below 1."""
    if isinstance(value, bool):
        raise InvalidPositionError(value)
    if isinstance(value, str):
        text = value.strip()
        if not text.lstrip("-").isdigit():
            raise InvalidPositionError(value)
        value = int(text)
    if not isinstance(value, int) or value < 1:
        raise InvalidPositionError(value)
    return value


class PricingQueryHandler:
    """Answers price polls for a session."""

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        venue_repository: VenueRepository,
        item_repository: QueueItemRepository,
        pricing_policy: PricingPolicy,
        quoted_positions: int = PricingConstants.DEFAULT_QUOTED_POSITIONS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._sessions = session_repository
        self._venues = venue_repository
        self._items = item_repository
        self._pricing = pricing_policy
        self._quoted_positions = quoted_positions
        self._clock = clock

    async def _context(self, session_id: int) -> tuple[QueueSession, Venue, int]:
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        venue = await self._venues.get(session.venue_id)
        if venue is None:
            raise VenueNotFoundError(session.venue_id)
        unplayed = await self._items.count_unplayed(session_id)
        return session, venue, unplayed

    async def current_prices(self, session_id: int) -> CurrentPricesView:
        _, venue, unplayed = await self._context(session_id)
        now = self._clock()

        quotes = [
            PositionQuote.of(
                position, self._pricing.price(venue, position, now=now, queue_length=unplayed)
            )
            for position in range(1, self._quoted_positions + 1)
        ]
        factors = self._pricing.factors(venue, 1, now=now, queue_length=unplayed)
        return CurrentPricesView(session_id=session_id, positions=quotes, factors=factors)

    async def position_price(self, session_id: int, position: int | str) -> PositionPriceView:
        requested = parse_position(position)
        _, venue, unplayed = await self._context(session_id)

        factors = self._pricing.factors(venue, requested, now=self._clock(), queue_length=unplayed)
        return PositionPriceView(
            position=requested,
            price_cents=factors.price_cents,
            price_display=format_cents(factors.price_cents),
            factors=factors,
        )

    async def factors(self, session_id: int, position: int | str) -> PricingFactors:
        requested = parse_position(position)
        _, venue, unplayed = await self._context(session_id)
        return self._pricing.factors(venue, requested, now=self._clock(), queue_length=unplayed)
