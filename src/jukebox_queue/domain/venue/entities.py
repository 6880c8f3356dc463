"""Venue configuration entity."""

from __future__ import annotations

from decimal import Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jukebox_queue.domain.shared.constants import PricingConstants
from jukebox_queue.domain.shared.datetime_utils import utcnow
from jukebox_queue.domain.shared.messages import ErrorMessages
from jukebox_queue.domain.shared.types import (
    DisplayNameStr,
    EntityId,
    HourOfDay,
    Multiplier,
    PositiveCents,
    UtcDatetimeField,
)


class Venue(BaseModel):
    """A venue owns pricing configuration and hosts queue sessions."""

    model_config = ConfigDict(frozen=True)

    id: EntityId | None = None
    name: DisplayNameStr
    host_user_id: EntityId

    pricing_enabled: bool = True
    base_price_cents: PositiveCents = PricingConstants.DEFAULT_BASE_PRICE_CENTS
    min_price_cents: PositiveCents = PricingConstants.DEFAULT_MIN_PRICE_CENTS
    max_price_cents: PositiveCents = PricingConstants.DEFAULT_MAX_PRICE_CENTS
    price_multiplier: Multiplier = Decimal("1.0")

    peak_hours_start: HourOfDay = PricingConstants.DEFAULT_PEAK_HOURS_START
    peak_hours_end: HourOfDay = PricingConstants.DEFAULT_PEAK_HOURS_END
    peak_hours_multiplier: Multiplier = Decimal("1.5")
    timezone: str = "UTC"

    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(ErrorMessages.UNKNOWN_TIMEZONE.format(timezone=v)) from e
        return v

    @model_validator(mode="after")
    def _validate_price_bounds(self) -> Venue:
        if self.min_price_cents > self.max_price_cents:
            raise ValueError(
                ErrorMessages.PRICE_BOUNDS_INVERTED.format(
                    min=self.min_price_cents, max=self.max_price_cents
                )
            )
        return self

    def in_peak_hours(self, hour: int) -> bool:
        """Whether ``hour`` falls inside ``[peak_hours_start, peak_hours_end)``.

        A window with start > end wraps midnight (e.g. 22 -> 2). A window with
        start == end is empty.
        """
        start, end = self.peak_hours_start, self.peak_hours_end
        if start < end:
            return start <= hour < end
        if start > end:
            return hour >= start or hour < end
        return False

    def is_hosted_by(self, user_id: int) -> bool:
        return self.host_user_id == user_id
