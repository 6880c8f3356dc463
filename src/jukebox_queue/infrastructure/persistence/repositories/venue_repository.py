"""SQLite implementation of the venue repository."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from jukebox_queue.domain.shared.datetime_utils import UtcDateTime
from jukebox_queue.domain.shared.messages import LogTemplates
from jukebox_queue.domain.venue.entities import Venue
from jukebox_queue.domain.venue.repository import VenueRepository

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteVenueRepository(VenueRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def add(self, venue: Venue) -> Venue:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO venues (
                    name, host_user_id, pricing_enabled, base_price_cents,
                    min_price_cents, max_price_cents, price_multiplier,
                    peak_hours_start, peak_hours_end, peak_hours_multiplier,
                    timezone, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    venue.name,
                    venue.host_user_id,
                    int(venue.pricing_enabled),
                    venue.base_price_cents,
                    venue.min_price_cents,
                    venue.max_price_cents,
                    str(venue.price_multiplier),
                    venue.peak_hours_start,
                    venue.peak_hours_end,
                    str(venue.peak_hours_multiplier),
                    venue.timezone,
                    UtcDateTime(venue.created_at).iso,
                ),
            )
            venue_id = cursor.lastrowid

        logger.info(LogTemplates.VENUE_CREATED, venue_id, venue.name, venue.host_user_id)
        return venue.model_copy(update={"id": venue_id})

    async def get(self, venue_id: int) -> Venue | None:
        row = await self._db.fetch_one("SELECT * FROM venues WHERE id = ?", (venue_id,))
        if row is None:
            return None
        return self._row_to_venue(row)

    @staticmethod
    def _row_to_venue(row: dict[str, Any]) -> Venue:
        return Venue(
            id=row["id"],
            name=row["name"],
            host_user_id=row["host_user_id"],
            pricing_enabled=bool(row["pricing_enabled"]),
            base_price_cents=row["base_price_cents"],
            min_price_cents=row["min_price_cents"],
            max_price_cents=row["max_price_cents"],
            price_multiplier=Decimal(row["price_multiplier"]),
            peak_hours_start=row["peak_hours_start"],
            peak_hours_end=row["peak_hours_end"],
            peak_hours_multiplier=Decimal(row["peak_hours_multiplier"]),
            timezone=row["timezone"],
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
        )
