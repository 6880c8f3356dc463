"""Pricing Policy Engine.

Quotes the cost of buying a queue position. The computation is pure: it
reads venue configuration and an injected clock, and performs no I/O, so it
is safe to call on every client poll.

The formula, for a venue with pricing enabled::

    effective_base = base_price_cents * price_multiplier
                     (* peak_hours_multiplier inside the peak window)
    weight(p)      = 1 / p ** position_exponent
    raw_price      = round_half_up(effective_base * weight(p))
    price          = clamp(raw_price, min_price_cents, max_price_cents)

With pricing disabled every position costs a flat ``base_price_cents``
(still kept within the venue bounds).
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from jukebox_queue.domain.shared.datetime_utils import UtcDateTime
from jukebox_queue.domain.shared.exceptions import InvalidPositionError
from jukebox_queue.domain.shared.messages import ErrorMessages
from jukebox_queue.domain.shared.serialization import CamelModel
from jukebox_queue.domain.shared.types import (
    Cents,
    DecimalFloat,
    HourOfDay,
    NonNegativeInt,
    QueuePositionInt,
)
from jukebox_queue.domain.venue.entities import Venue

_ONE = Decimal(1)


class PricingFactors(CamelModel):
    """Intermediate values of a price quote, exposed for client display."""

    position: QueuePositionInt
    pricing_enabled: bool
    local_hour: HourOfDay
    base_price_cents: Cents
    price_multiplier: DecimalFloat
    peak_applied: bool
    peak_hours_multiplier: DecimalFloat
    effective_base_cents: DecimalFloat
    weight: DecimalFloat
    raw_price_cents: Cents
    min_price_cents: Cents
    max_price_cents: Cents
    price_cents: Cents
    queue_length: NonNegativeInt = 0


class PricingPolicy:
    """Computes position prices for a venue.

    ``position_exponent`` shapes the position curve. The default of 1 gives
    ``weight(p) = 1/p``; larger values make later positions cheaper faster.
    Any positive exponent keeps the weight strictly decreasing.
    """

    def __init__(self, position_exponent: float | Decimal = 1) -> None:
        exponent = Decimal(str(position_exponent))
        if exponent <= 0:
            raise ValueError(ErrorMessages.INVALID_POSITION_EXPONENT)
        self._exponent = exponent

    @property
    def position_exponent(self) -> Decimal:
        return self._exponent

    @staticmethod
    def validate_position(position: object) -> int:
        """Return ``position`` as an int, rejecting anything below 1."""
        if isinstance(position, bool) or not isinstance(position, int) or position < 1:
            raise InvalidPositionError(position)
        return position

    def weight(self, position: int) -> Decimal:
        return _ONE / (Decimal(position) ** self._exponent)

    def factors(
        self,
        venue: Venue,
        position: int,
        *,
        now: datetime,
        queue_length: int = 0,
    ) -> PricingFactors:
        position = self.validate_position(position)
        local_hour = UtcDateTime(now).local_hour(venue.timezone)

        if venue.pricing_enabled:
            effective_base = Decimal(venue.base_price_cents) * venue.price_multiplier
            peak_applied = venue.in_peak_hours(local_hour)
            if peak_applied:
                effective_base *= venue.peak_hours_multiplier
            weight = self.weight(position)
        else:
            effective_base = Decimal(venue.base_price_cents)
            peak_applied = False
            weight = _ONE

        raw_price = int((effective_base * weight).quantize(_ONE, rounding=ROUND_HALF_UP))
        price = min(max(raw_price, venue.min_price_cents), venue.max_price_cents)

        return PricingFactors(
            position=position,
            pricing_enabled=venue.pricing_enabled,
            local_hour=local_hour,
            base_price_cents=venue.base_price_cents,
            price_multiplier=venue.price_multiplier,
            peak_applied=peak_applied,
            peak_hours_multiplier=venue.peak_hours_multiplier,
            effective_base_cents=effective_base,
            weight=weight,
            raw_price_cents=raw_price,
            min_price_cents=venue.min_price_cents,
            max_price_cents=venue.max_price_cents,
            price_cents=price,
            queue_length=queue_length,
        )

    def price(
        self,
        venue: Venue,
        position: int,
        *,
        now: datetime,
        queue_length: int = 0,
    ) -> int:
        return self.factors(venue, position, now=now, queue_length=queue_length).price_cents
