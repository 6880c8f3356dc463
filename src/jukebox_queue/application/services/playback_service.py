"""Playback Application Service - the "now playing" transitions of a session."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from ...domain.queue import ordering
from ...domain.queue.entities import QueueItem, QueueSession
from ...domain.shared.datetime_utils import utcnow
from ...domain.shared.exceptions import SessionNotFoundError
from ...domain.shared.messages import LogTemplates
from .queue_models import PlayNextResult, QueueItemView

if TYPE_CHECKING:
    from ...domain.queue.repository import QueueItemRepository, SessionRepository

logger = logging.getLogger(__name__)


class PlaybackApplicationService:
    """Starts, stops and advances playback for a session.

    Each transition is a single atomic repository call; a storage failure
    surfaces as ``TransitionFailureError`` and is never retried here.
    """

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        item_repository: QueueItemRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._sessions = session_repository
        self._items = item_repository
        self._clock = clock

    async def _require_session(self, session_id: int) -> QueueSession:
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def play_track(self, session_id: int, item_id: int) -> QueueItem:
        """Make ``item_id`` the session's only playing item."""
        session = await self._require_session(session_id)
        session.ensure_active("play_track")
        return await self._sessions.start_playback(session_id, item_id, self._clock())

    async def stop_playback(self, session_id: int) -> None:
        """Clear the playing item. Safe to call repeatedly and in any state."""
        await self._require_session(session_id)
        await self._sessions.stop_playback(session_id)

    async def play_next(self, session_id: int) -> PlayNextResult:
        """Play the head of the playback order, or stop if nothing is pending."""
        session = await self._require_session(session_id)
        session.ensure_active("play_next")

        candidate = ordering.next_up(await self._items.list_pending(session_id))
        if candidate is None or candidate.id is None:
            logger.info(LogTemplates.PLAYBACK_QUEUE_EMPTY, session_id)
            await self._sessions.stop_playback(session_id)
            return PlayNextResult(session_id=session_id, queue_empty=True)

        playing = await self._sessions.start_playback(session_id, candidate.id, self._clock())
        remaining = await self._items.count_unplayed(session_id)
        return PlayNextResult(
            session_id=session_id,
            item=QueueItemView.from_item(playing),
            songs_count=remaining,
        )
