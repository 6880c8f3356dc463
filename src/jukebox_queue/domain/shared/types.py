"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across bounded contexts is defined here once,
so models can simply annotate their fields::

    from jukebox_queue.domain.shared.types import EntityId, Cents

    class MyModel(BaseModel):
        user_id: EntityId
        amount_cents: Cents
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BeforeValidator, Field, PlainSerializer

# ── Numeric constraints ─────────────────────────────────────────────

EntityId = Annotated[int, Field(gt=0)]
"""Database row id (autoincrement, starts at 1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

Cents = Annotated[int, Field(ge=0)]
"""Non-negative amount of money in cents."""

PositiveCents = Annotated[int, Field(gt=0)]
"""Strictly positive amount of money in cents."""

HourOfDay = Annotated[int, Field(ge=0, le=23)]
"""Wall-clock hour: 0 … 23."""

QueuePositionInt = Annotated[int, Field(ge=1)]
"""One-based queue position (1 = play next)."""

Multiplier = Annotated[Decimal, Field(gt=0, max_digits=8, decimal_places=4)]
"""Positive decimal multiplier with up to four decimal places."""

DecimalFloat = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
"""Decimal kept exact in Python and emitted as a JSON number."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

DisplayNameStr = Annotated[str, Field(min_length=1, max_length=100)]
"""User or venue display name: 1-100 characters."""

JoinCodeStr = Annotated[str, Field(pattern=r"^\d{6}$")]
"""Six-digit numeric join code."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


# ── Settings-specific constraints ──────────────────────────────────

BusyTimeoutMs = Annotated[int, Field(ge=1000, le=30000)]
"""Database busy timeout in milliseconds: 1 000 … 30 000."""

ConnectionTimeoutS = Annotated[int, Field(ge=1, le=60)]
"""Database connection timeout in seconds: 1 … 60."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""
