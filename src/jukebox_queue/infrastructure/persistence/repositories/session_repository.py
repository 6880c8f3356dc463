"""SQLite implementation of the session repository.

Playback transitions run as one transaction each: every playing flag in the
session is cleared before the new one is set, so readers never observe two
playing items or a pointer that disagrees with the flags.

Status writes are compare-and-set against the status the caller read, and
ending a session stops its playback in the same transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

import aiosqlite

from jukebox_queue.domain.queue.entities import QueueItem, QueueSession
from jukebox_queue.domain.queue.repository import SessionRepository
from jukebox_queue.domain.queue.value_objects import ItemStatus, SessionStatus
from jukebox_queue.domain.shared.datetime_utils import UtcDateTime, iso_or_none
from jukebox_queue.domain.shared.exceptions import (
    InvalidOperationError,
    ItemNotFoundError,
    SessionNotFoundError,
    TransitionFailureError,
)
from jukebox_queue.domain.shared.messages import LogTemplates
from jukebox_queue.infrastructure.persistence.repositories.queue_item_repository import (
    row_to_item,
)

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)

# Retires the item that was playing and drops every playing flag in the session.
_CLEAR_PLAYING_SQL = """
    UPDATE queue_items
    SET status = CASE WHEN status = 'playing' THEN 'played' ELSE status END,
        is_currently_playing = 0
    WHERE session_id = ? AND (is_currently_playing = 1 OR status = 'playing')
"""


class SQLiteSessionRepository(SessionRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def add(self, session: QueueSession) -> QueueSession:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO queue_sessions (
                    venue_id, join_code, status, started_at, ended_at,
                    currently_playing_item_id, playback_started_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    session.venue_id,
                    session.join_code,
                    session.status.value,
                    UtcDateTime(session.started_at).iso,
                    iso_or_none(session.ended_at),
                    session.currently_playing_item_id,
                    iso_or_none(session.playback_started_at),
                ),
            )
            session_id = cursor.lastrowid

        return session.model_copy(update={"id": session_id})

    async def get(self, session_id: int) -> QueueSession | None:
        row = await self._db.fetch_one(
            "SELECT * FROM queue_sessions WHERE id = ?",
            (session_id,),
        )
        return self._row_to_session(row) if row else None

    async def get_open_for_venue(self, venue_id: int) -> QueueSession | None:
        row = await self._db.fetch_one(
            """
            SELECT * FROM queue_sessions
            WHERE venue_id = ? AND status != 'ended'
            ORDER BY id DESC LIMIT 1
            """,
            (venue_id,),
        )
        return self._row_to_session(row) if row else None

    async def save_status(self, session: QueueSession, expected: SessionStatus) -> None:
        if session.id is None:
            raise SessionNotFoundError("unsaved")
        async with self._db.transaction() as conn:
            await self._write_status(conn, session, expected)

    async def end(self, session: QueueSession, expected: SessionStatus) -> None:
        if session.id is None:
            raise SessionNotFoundError("unsaved")
        try:
            async with self._db.transaction() as conn:
                await self._write_status(conn, session, expected)
                await conn.execute(_CLEAR_PLAYING_SQL, (session.id,))
                await conn.execute(
                    """
                    UPDATE queue_sessions
                    SET currently_playing_item_id = NULL, playback_started_at = NULL
                    WHERE id = ?
                    """,
                    (session.id,),
                )
        except aiosqlite.Error as e:
            logger.exception(LogTemplates.PLAYBACK_TRANSITION_FAILED, "end_session", session.id)
            raise TransitionFailureError("end_session", session.id) from e

        logger.info(LogTemplates.PLAYBACK_STOPPED, session.id)

    @staticmethod
    async def _write_status(
        conn: aiosqlite.Connection, session: QueueSession, expected: SessionStatus
    ) -> None:
        """Compare-and-set the stored status, refusing writes from a stale copy."""
        cursor = await conn.execute(
            """
            UPDATE queue_sessions SET status = ?, ended_at = ?
            WHERE id = ? AND status = ?
            """,
            (session.status.value, iso_or_none(session.ended_at), session.id, expected.value),
        )
        if cursor.rowcount:
            return

        cursor = await conn.execute(
            "SELECT status FROM queue_sessions WHERE id = ?", (session.id,)
        )
        row = await cursor.fetchone()
        if row is None:
            raise SessionNotFoundError(session.id)
        logger.info(
            LogTemplates.SESSION_STATUS_CONFLICT,
            session.id,
            expected.value,
            session.status.value,
        )
        raise InvalidOperationError(session.status.value, row["status"])

    async def start_playback(self, session_id: int, item_id: int, now: datetime) -> QueueItem:
        played_at = UtcDateTime(now).iso
        try:
            async with self._db.transaction() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM queue_items WHERE id = ? AND session_id = ?",
                    (item_id, session_id),
                )
                row = await cursor.fetchone()
                if row is None:
                    raise ItemNotFoundError(item_id)
                item = row_to_item(dict(row))
                if not item.is_pending:
                    raise InvalidOperationError("play_track", item.status.value)

                await conn.execute(_CLEAR_PLAYING_SQL, (session_id,))
                await conn.execute(
                    """
                    UPDATE queue_items
                    SET status = 'playing', played_at = ?, is_currently_playing = 1
                    WHERE id = ?
                    """,
                    (played_at, item_id),
                )
                cursor = await conn.execute(
                    """
                    UPDATE queue_sessions
                    SET currently_playing_item_id = ?, playback_started_at = ?
                    WHERE id = ?
                    """,
                    (item_id, played_at, session_id),
                )
                if cursor.rowcount == 0:
                    raise SessionNotFoundError(session_id)
        except aiosqlite.Error as e:
            logger.exception(LogTemplates.PLAYBACK_TRANSITION_FAILED, "play_track", session_id)
            raise TransitionFailureError("play_track", session_id) from e

        logger.info(LogTemplates.PLAYBACK_STARTED, session_id, item_id)
        return item.model_copy(
            update={
                "status": ItemStatus.PLAYING,
                "played_at": UtcDateTime(now).dt,
                "is_currently_playing": True,
            }
        )

    async def stop_playback(self, session_id: int) -> None:
        try:
            async with self._db.transaction() as conn:
                await conn.execute(_CLEAR_PLAYING_SQL, (session_id,))
                cursor = await conn.execute(
                    """
                    UPDATE queue_sessions
                    SET currently_playing_item_id = NULL, playback_started_at = NULL
                    WHERE id = ?
                    """,
                    (session_id,),
                )
                if cursor.rowcount == 0:
                    raise SessionNotFoundError(session_id)
        except aiosqlite.Error as e:
            logger.exception(LogTemplates.PLAYBACK_TRANSITION_FAILED, "stop_playback", session_id)
            raise TransitionFailureError("stop_playback", session_id) from e

        logger.info(LogTemplates.PLAYBACK_STOPPED, session_id)

    @staticmethod
    def _row_to_session(row: dict[str, Any]) -> QueueSession:
        return QueueSession(
            id=row["id"],
            venue_id=row["venue_id"],
            join_code=row["join_code"],
            status=SessionStatus(row["status"]),
            started_at=UtcDateTime.from_iso(row["started_at"]).dt,
            ended_at=UtcDateTime.from_optional_iso(row["ended_at"]),
            currently_playing_item_id=row["currently_playing_item_id"],
            playback_started_at=UtcDateTime.from_optional_iso(row["playback_started_at"]),
        )
