"""SQLite implementation of the queue item repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from jukebox_queue.domain.ledger.entities import BalanceTransaction, Payment, TransactionType
from jukebox_queue.domain.queue.entities import QueueItem
from jukebox_queue.domain.queue.repository import QueueItemRepository
from jukebox_queue.domain.queue.services import QueueDomainService
from jukebox_queue.domain.queue.value_objects import ItemStatus
from jukebox_queue.domain.shared.datetime_utils import UtcDateTime, iso_or_none
from jukebox_queue.domain.shared.exceptions import (
    InvalidOperationError,
    ItemNotFoundError,
    ValidationError,
)
from jukebox_queue.domain.shared.messages import ErrorMessages, LogTemplates
from jukebox_queue.infrastructure.persistence.repositories.ledger_repository import (
    apply_credit,
    apply_debit,
)

if TYPE_CHECKING:
    import aiosqlite

    from ..database import Database

logger = logging.getLogger(__name__)

_PENDING_CLAUSE = "status = 'pending' AND played_at IS NULL"


def row_to_item(row: dict[str, Any]) -> QueueItem:
    return QueueItem(
        id=row["id"],
        session_id=row["session_id"],
        title=row["title"],
        artist=row["artist"],
        external_id=row["external_id"],
        cover_url=row["cover_url"],
        duration_ms=row["duration_ms"],
        preview_url=row["preview_url"],
        user_id=row["user_id"],
        user_display_name=row["user_display_name"],
        base_priority=row["base_priority"],
        vote_score=row["vote_score"],
        status=ItemStatus(row["status"]),
        played_at=UtcDateTime.from_optional_iso(row["played_at"]),
        is_currently_playing=bool(row["is_currently_playing"]),
        position_paid_cents=row["position_paid_cents"],
        refund_amount_cents=row["refund_amount_cents"],
        inserted_at_position=row["inserted_at_position"],
        position_guaranteed=bool(row["position_guaranteed"]),
        created_at=UtcDateTime.from_iso(row["created_at"]).dt,
    )


class SQLiteQueueItemRepository(QueueItemRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def add(
        self,
        item: QueueItem,
        payment: Payment | None = None,
        *,
        place_at: int | None = None,
    ) -> tuple[QueueItem, BalanceTransaction | None]:
        async with self._db.transaction() as conn:
            if place_at is not None:
                item = await self._place(conn, item, place_at)

            cursor = await conn.execute(
                """
                INSERT INTO queue_items (
                    session_id, user_id, user_display_name, title, artist,
                    external_id, cover_url, duration_ms, preview_url,
                    base_priority, vote_score, status, played_at, is_currently_playing,
                    position_paid_cents, refund_amount_cents, inserted_at_position,
                    position_guaranteed, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.session_id,
                    item.user_id,
                    item.user_display_name,
                    item.title,
                    item.artist,
                    item.external_id,
                    item.cover_url,
                    item.duration_ms,
                    item.preview_url,
                    item.base_priority,
                    item.vote_score,
                    item.status.value,
                    iso_or_none(item.played_at),
                    int(item.is_currently_playing),
                    item.position_paid_cents,
                    item.refund_amount_cents,
                    item.inserted_at_position,
                    int(item.position_guaranteed),
                    UtcDateTime(item.created_at).iso,
                ),
            )
            item_id = cursor.lastrowid

            # The debit references the new row; if it fails the insert rolls back with it.
            entry = None
            if payment is not None:
                entry = await apply_debit(
                    conn,
                    user_id=payment.user_id,
                    amount_cents=payment.amount_cents,
                    description=payment.description,
                    queue_item_id=item_id,
                )

        return item.model_copy(update={"id": item_id}), entry

    @staticmethod
    async def _place(conn: aiosqlite.Connection, item: QueueItem, position: int) -> QueueItem:
        """Tier ``item`` for ``position`` against the pending rows seen by ``conn``."""
        cursor = await conn.execute(
            f"SELECT * FROM queue_items WHERE session_id = ? AND {_PENDING_CLAUSE} ORDER BY id ASC",
            (item.session_id,),
        )
        pending = [row_to_item(dict(row)) for row in await cursor.fetchall()]
        placement = QueueDomainService.place_purchase(position, pending)

        if placement.shifted_item_ids:
            marks = ", ".join("?" for _ in placement.shifted_item_ids)
            await conn.execute(
                f"UPDATE queue_items SET base_priority = base_priority - 1 WHERE id IN ({marks})",
                placement.shifted_item_ids,
            )
        logger.debug(
            LogTemplates.ITEM_PLACED,
            item.session_id,
            placement.position,
            placement.base_priority,
            len(placement.shifted_item_ids),
        )
        return item.model_copy(
            update={
                "base_priority": placement.base_priority,
                "inserted_at_position": placement.position,
            }
        )

    async def get(self, item_id: int) -> QueueItem | None:
        row = await self._db.fetch_one("SELECT * FROM queue_items WHERE id = ?", (item_id,))
        return row_to_item(row) if row else None

    async def list_for_session(self, session_id: int) -> list[QueueItem]:
        rows = await self._db.fetch_all(
            "SELECT * FROM queue_items WHERE session_id = ? ORDER BY id ASC",
            (session_id,),
        )
        return [row_to_item(row) for row in rows]

    async def list_pending(self, session_id: int) -> list[QueueItem]:
        rows = await self._db.fetch_all(
            f"SELECT * FROM queue_items WHERE session_id = ? AND {_PENDING_CLAUSE} ORDER BY id ASC",
            (session_id,),
        )
        return [row_to_item(row) for row in rows]

    async def count_unplayed(self, session_id: int) -> int:
        row = await self._db.fetch_one(
            f"SELECT COUNT(*) AS n FROM queue_items WHERE session_id = ? AND {_PENDING_CLAUSE}",
            (session_id,),
        )
        return row["n"] if row else 0

    async def get_current(self, session_id: int) -> QueueItem | None:
        row = await self._db.fetch_one(
            "SELECT * FROM queue_items WHERE session_id = ? AND is_currently_playing = 1",
            (session_id,),
        )
        return row_to_item(row) if row else None

    async def apply_vote(self, item_id: int, delta: int) -> int | None:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE queue_items SET vote_score = vote_score + ?
                WHERE id = ? AND status != 'played'
                """,
                (delta, item_id),
            )
            if cursor.rowcount == 0:
                return None
            cursor = await conn.execute(
                "SELECT vote_score FROM queue_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()

        score = row["vote_score"]
        logger.debug(LogTemplates.ITEM_VOTED, item_id, score)
        return score

    async def refund(self, item_id: int, amount_cents: int, description: str) -> BalanceTransaction:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("SELECT * FROM queue_items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
            if row is None:
                raise ItemNotFoundError(item_id)
            item = row_to_item(dict(row))
            if item.is_played:
                raise InvalidOperationError("refund", item.status.value)
            if item.user_id is None:
                raise ValidationError(
                    ErrorMessages.ITEM_NOT_REFUNDABLE.format(item_id=item_id), field="item_id"
                )
            if amount_cents > item.refundable_cents:
                raise ValidationError(
                    ErrorMessages.REFUND_EXCEEDS_PAYMENT.format(
                        amount=amount_cents, refundable=item.refundable_cents
                    ),
                    field="amount_cents",
                )

            await conn.execute(
                """
                UPDATE queue_items SET refund_amount_cents = refund_amount_cents + ?
                WHERE id = ?
                """,
                (amount_cents, item_id),
            )
            entry = await apply_credit(
                conn,
                user_id=item.user_id,
                amount_cents=amount_cents,
                transaction_type=TransactionType.REFUND,
                description=description,
                queue_item_id=item_id,
            )

        logger.info(LogTemplates.ITEM_REFUNDED, amount_cents, item.user_id, item_id)
        return entry
