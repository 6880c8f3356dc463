"""SQLite-backed join code registry."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

from jukebox_queue.application.interfaces.join_codes import JoinCodeRegistry
from jukebox_queue.domain.shared.constants import JoinCodeConstants
from jukebox_queue.domain.shared.exceptions import BusinessRuleViolationError
from jukebox_queue.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from ..database import Database


class SQLiteJoinCodeRegistry(JoinCodeRegistry):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def generate(self) -> str:
        upper = 10**JoinCodeConstants.LENGTH
        for _ in range(JoinCodeConstants.MAX_ATTEMPTS):
            code = f"{secrets.randbelow(upper):0{JoinCodeConstants.LENGTH}d}"
            if await self.resolve(code) is None:
                return code
        raise BusinessRuleViolationError(
            "unique_join_code", ErrorMessages.JOIN_CODES_EXHAUSTED
        )

    async def resolve(self, code: str) -> int | None:
        if not self.is_valid_format(code):
            return None
        row = await self._db.fetch_one(
            """
            SELECT id FROM queue_sessions
            WHERE join_code = ? AND status != 'ended'
            ORDER BY id DESC LIMIT 1
            """,
            (code,),
        )
        return row["id"] if row else None
