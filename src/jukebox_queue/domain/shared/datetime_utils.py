"""Date/time helpers.

All datetimes are timezone-aware UTC. SQLite columns hold ISO-8601 strings
with an explicit offset; venue-local hours are derived on demand.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from ...domain.shared.messages import ErrorMessages


@dataclass(frozen=True, slots=True)
class UtcDateTime:
    """A tiny value-object wrapper around a timezone-aware UTC `datetime`."""

    dt: datetime

    def __post_init__(self) -> None:
        if self.dt.tzinfo is None:
            raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
        # Normalize to UTC
        object.__setattr__(self, "dt", self.dt.astimezone(UTC))

    # ---- Constructors ----

    @classmethod
    def from_iso(cls, value: str) -> UtcDateTime:
        # Accepts: '...+00:00' or '...Z'
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return cls(datetime.fromisoformat(value))

    @classmethod
    def from_optional_iso(cls, value: str | None) -> datetime | None:
        if value is None:
            return None
        return cls.from_iso(value).dt

    # ---- Computed fields / formats ----

    @property
    def iso(self) -> str:
        """RFC3339/ISO8601 with explicit offset (+00:00)."""
        return self.dt.isoformat()

    def local_hour(self, timezone: str) -> int:
        """Wall-clock hour of this instant in the given IANA timezone."""
        return self.dt.astimezone(ZoneInfo(timezone)).hour


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def iso_or_none(value: datetime | None) -> str | None:
    return UtcDateTime(value).iso if value is not None else None
