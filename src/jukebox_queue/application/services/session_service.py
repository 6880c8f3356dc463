"""Session Application Service - host-only lifecycle actions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from ...domain.queue.entities import QueueSession
from ...domain.shared.datetime_utils import utcnow
from ...domain.shared.exceptions import (
    BusinessRuleViolationError,
    NotAuthorizedError,
    SessionNotFoundError,
    VenueNotFoundError,
)
from ...domain.shared.messages import LogTemplates
from .queue_models import SessionStatusResult

if TYPE_CHECKING:
    from ...domain.queue.repository import SessionRepository
    from ...domain.venue.entities import Venue
    from ...domain.venue.repository import VenueRepository
    from ..interfaces.join_codes import JoinCodeRegistry

logger = logging.getLogger(__name__)


class SessionApplicationService:
    """Creates, pauses, resumes and ends sessions on behalf of a venue's host."""

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        venue_repository: VenueRepository,
        join_codes: JoinCodeRegistry,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._sessions = session_repository
        self._venues = venue_repository
        self._join_codes = join_codes
        self._clock = clock

    async def _require_venue(self, venue_id: int) -> Venue:
        venue = await self._venues.get(venue_id)
        if venue is None:
            raise VenueNotFoundError(venue_id)
        return venue

    async def _require_hosted_session(
        self, session_id: int, actor_id: int, action: str
    ) -> QueueSession:
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        venue = await self._require_venue(session.venue_id)
        if not venue.is_hosted_by(actor_id):
            raise NotAuthorizedError(actor_id, action)
        return session

    async def create(self, venue_id: int, actor_id: int) -> SessionStatusResult:
        venue = await self._require_venue(venue_id)
        if not venue.is_hosted_by(actor_id):
            raise NotAuthorizedError(actor_id, "create session")

        existing = await self._sessions.get_open_for_venue(venue_id)
        if existing is not None:
            logger.info(LogTemplates.SESSION_CREATE_REJECTED, venue_id, existing.id)
            raise BusinessRuleViolationError(
                "session_already_active", f"Venue {venue_id} already has an active session"
            )

        join_code = await self._join_codes.generate()
        session = await self._sessions.add(
            QueueSession.build(venue_id=venue_id, join_code=join_code, now=self._clock())
        )
        logger.info(LogTemplates.SESSION_CREATED, session.id, venue_id, join_code)
        return SessionStatusResult.from_session(session)

    async def pause(self, session_id: int, actor_id: int) -> SessionStatusResult:
        session = await self._require_hosted_session(session_id, actor_id, "pause session")
        previous = session.pause()
        await self._sessions.save_status(session, previous)
        logger.info(
            LogTemplates.SESSION_TRANSITIONED, session_id, previous.value, session.status.value
        )
        return SessionStatusResult.from_session(session)

    async def resume(self, session_id: int, actor_id: int) -> SessionStatusResult:
        session = await self._require_hosted_session(session_id, actor_id, "resume session")
        previous = session.resume()
        await self._sessions.save_status(session, previous)
        logger.info(
            LogTemplates.SESSION_TRANSITIONED, session_id, previous.value, session.status.value
        )
        return SessionStatusResult.from_session(session)

    async def end(self, session_id: int, actor_id: int) -> SessionStatusResult:
        session = await self._require_hosted_session(session_id, actor_id, "end session")
        previous = session.end(self._clock())
        await self._sessions.end(session, previous)
        logger.info(
            LogTemplates.SESSION_TRANSITIONED, session_id, previous.value, session.status.value
        )
        return SessionStatusResult.from_session(session)

    async def resolve_join_code(self, join_code: str) -> QueueSession:
        """Find the open session a guest's join code points to."""
        session_id = await self._join_codes.resolve(join_code)
        session = await self._sessions.get(session_id) if session_id is not None else None
        if session is None:
            raise SessionNotFoundError(join_code)
        return session
