"""Command and handler for voting a queue item up or down."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from ...domain.shared.exceptions import (
    InvalidOperationError,
    ItemNotFoundError,
    SessionNotFoundError,
)
from ...domain.shared.messages import ErrorMessages
from ...domain.shared.serialization import CamelModel
from ...domain.shared.types import EntityId

if TYPE_CHECKING:
    from ...domain.queue.repository import QueueItemRepository, SessionRepository


class CastVoteCommand(BaseModel):
    """Signed change to an item's vote score (usually +1 or -1)."""

    model_config = ConfigDict(frozen=True, strict=True)

    item_id: EntityId
    delta: int = 1

    @field_validator("delta")
    @classmethod
    def _non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError(ErrorMessages.ZERO_VOTE_DELTA)
        return v


class CastVoteResult(CamelModel):
    item_id: EntityId
    vote_score: int


class CastVoteHandler:
    """Applies a vote as a single atomic counter update."""

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        item_repository: QueueItemRepository,
    ) -> None:
        self._sessions = session_repository
        self._items = item_repository

    async def handle(self, command: CastVoteCommand) -> CastVoteResult:
        item = await self._items.get(command.item_id)
        if item is None:
            raise ItemNotFoundError(command.item_id)
        if item.is_played:
            raise InvalidOperationError("vote", item.status.value)

        session = await self._sessions.get(item.session_id)
        if session is None:
            raise SessionNotFoundError(item.session_id)
        session.ensure_open("vote")

        score = await self._items.apply_vote(command.item_id, command.delta)
        if score is None:
            # Played between the read above and the update.
            raise InvalidOperationError("vote", "played")
        return CastVoteResult(item_id=command.item_id, vote_score=score)
