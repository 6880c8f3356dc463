"""Core domain entities for the queue bounded context."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from jukebox_queue.domain.queue.value_objects import CatalogTrack, ItemStatus, SessionStatus
from jukebox_queue.domain.shared.datetime_utils import utcnow
from jukebox_queue.domain.shared.exceptions import InvalidOperationError
from jukebox_queue.domain.shared.money import format_cents
from jukebox_queue.domain.shared.types import (
    Cents,
    EntityId,
    HttpUrlStr,
    JoinCodeStr,
    NonEmptyStr,
    NonNegativeInt,
    QueuePositionInt,
    TrackTitleStr,
    UtcDatetimeField,
)


class QueueItem(BaseModel):
    """A requested track within a session.

    Items are snapshots; scheduling fields change only through atomic
    repository operations (votes, playback transitions, refunds).
    """

    model_config = ConfigDict(frozen=True)

    id: EntityId | None = None
    session_id: EntityId

    # Track metadata
    title: TrackTitleStr
    artist: NonEmptyStr | None = None
    external_id: NonEmptyStr | None = None
    cover_url: HttpUrlStr | None = None
    duration_ms: NonNegativeInt | None = None
    preview_url: HttpUrlStr | None = None

    # Request metadata
    user_id: EntityId | None = None
    user_display_name: NonEmptyStr | None = None

    # Scheduling
    base_priority: int = 0
    vote_score: int = 0
    status: ItemStatus = ItemStatus.PENDING
    played_at: UtcDatetimeField | None = None
    is_currently_playing: bool = False

    # Purchase
    position_paid_cents: Cents = 0
    refund_amount_cents: Cents = 0
    inserted_at_position: QueuePositionInt | None = None
    position_guaranteed: bool = False

    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @classmethod
    def from_catalog(cls, session_id: int, track: CatalogTrack, **fields: object) -> QueueItem:
        """Build an item from catalog metadata plus request fields."""
        return cls(
            session_id=session_id,
            title=track.title,
            artist=track.artist,
            external_id=track.external_id,
            cover_url=track.cover_url,
            duration_ms=track.duration_ms,
            preview_url=track.preview_url,
            **fields,
        )

    @property
    def is_pending(self) -> bool:
        return self.status is ItemStatus.PENDING and self.played_at is None

    @property
    def is_played(self) -> bool:
        return self.status is ItemStatus.PLAYED

    @property
    def is_purchased(self) -> bool:
        return self.base_priority < 0

    @property
    def refundable_cents(self) -> int:
        return self.position_paid_cents - self.refund_amount_cents

    @property
    def price_display(self) -> str:
        if self.position_paid_cents == 0:
            return "Free"
        return format_cents(self.position_paid_cents)

    @property
    def display_title(self) -> str:
        if self.artist:
            return f"{self.title} - {self.artist}"
        return self.title


class QueueSession(BaseModel):
    """Aggregate root for one venue's live queue."""

    model_config = ConfigDict(validate_assignment=True)

    id: EntityId | None = None
    venue_id: EntityId
    join_code: JoinCodeStr
    status: SessionStatus = SessionStatus.ACTIVE
    started_at: UtcDatetimeField
    ended_at: UtcDatetimeField | None = None
    currently_playing_item_id: EntityId | None = None
    playback_started_at: UtcDatetimeField | None = None

    @classmethod
    def build(cls, *, venue_id: int, join_code: str, now: datetime | None = None) -> QueueSession:
        """Assemble a new active session with its defaults, then validate it."""
        defaults = {
            "status": SessionStatus.ACTIVE,
            "started_at": now or utcnow(),
            "ended_at": None,
            "currently_playing_item_id": None,
            "playback_started_at": None,
        }
        return cls(venue_id=venue_id, join_code=join_code, **defaults)

    @property
    def is_open(self) -> bool:
        return self.status.is_open

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    def transition_to(self, target: SessionStatus) -> SessionStatus:
        """Move to ``target``, returning the previous status."""
        if not self.status.can_transition_to(target):
            raise InvalidOperationError(target.value, self.status.value)
        previous = self.status
        self.status = target
        return previous

    def pause(self) -> SessionStatus:
        return self.transition_to(SessionStatus.PAUSED)

    def resume(self) -> SessionStatus:
        return self.transition_to(SessionStatus.ACTIVE)

    def end(self, now: datetime | None = None) -> SessionStatus:
        previous = self.transition_to(SessionStatus.ENDED)
        self.ended_at = now or utcnow()
        self.currently_playing_item_id = None
        self.playback_started_at = None
        return previous

    def ensure_open(self, operation: str) -> None:
        """Reject ``operation`` once the session has ended."""
        if not self.is_open:
            raise InvalidOperationError(operation, self.status.value)

    def ensure_active(self, operation: str) -> None:
        """Reject ``operation`` unless the session is active."""
        if not self.is_active:
            raise InvalidOperationError(operation, self.status.value)
