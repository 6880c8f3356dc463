"""Payload models shared by the queue application services, commands and queries."""

from __future__ import annotations

from datetime import datetime

from jukebox_queue.domain.queue.entities import QueueItem, QueueSession
from jukebox_queue.domain.queue.value_objects import ItemStatus, SessionStatus
from jukebox_queue.domain.shared.money import format_cents
from jukebox_queue.domain.shared.serialization import CamelModel
from jukebox_queue.domain.shared.types import Cents, EntityId, NonNegativeInt


class QueueItemView(CamelModel):
    """Client-facing representation of a queue item."""

    id: EntityId
    title: str
    artist: str | None = None
    cover_url: str | None = None
    duration_ms: int | None = None
    preview_url: str | None = None
    user_display_name: str | None = None
    vote_score: int
    base_priority: int
    status: ItemStatus
    played_at: datetime | None = None
    position_paid_cents: Cents
    price_display: str
    inserted_at_position: int | None = None
    position_guaranteed: bool = False
    position: int | None = None
    was_bumped: bool = False
    jump_ahead_price_cents: Cents = 0
    jump_ahead_price_display: str = "Free"

    @classmethod
    def from_item(
        cls,
        item: QueueItem,
        *,
        position: int | None = None,
        was_bumped: bool = False,
        jump_ahead_price_cents: int = 0,
    ) -> QueueItemView:
        """Build the view; a jump-ahead price of 0 displays as Free."""
        return cls(
            id=item.id,
            title=item.title,
            artist=item.artist,
            cover_url=item.cover_url,
            duration_ms=item.duration_ms,
            preview_url=item.preview_url,
            user_display_name=item.user_display_name,
            vote_score=item.vote_score,
            base_priority=item.base_priority,
            status=item.status,
            played_at=item.played_at,
            position_paid_cents=item.position_paid_cents,
            price_display=item.price_display,
            inserted_at_position=item.inserted_at_position,
            position_guaranteed=item.position_guaranteed,
            position=position,
            was_bumped=was_bumped,
            jump_ahead_price_cents=jump_ahead_price_cents,
            jump_ahead_price_display=(
                format_cents(jump_ahead_price_cents) if jump_ahead_price_cents else "Free"
            ),
        )


class SessionStatusResult(CamelModel):
    """Result of a host session action."""

    session_id: EntityId
    status: SessionStatus
    join_code: str

    @classmethod
    def from_session(cls, session: QueueSession) -> SessionStatusResult:
        return cls(session_id=session.id, status=session.status, join_code=session.join_code)


class PlayNextResult(CamelModel):
    session_id: EntityId
    item: QueueItemView | None = None
    queue_empty: bool = False
    songs_count: NonNegativeInt = 0


class BalanceView(CamelModel):
    user_id: EntityId
    balance_cents: int
    balance_display: str

    @classmethod
    def of(cls, user_id: int, balance_cents: int) -> BalanceView:
        return cls(
            user_id=user_id,
            balance_cents=balance_cents,
            balance_display=format_cents(balance_cents),
        )
