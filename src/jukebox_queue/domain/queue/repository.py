"""
Queue Domain Repository Interfaces

Abstract base classes defining the contracts for session and item persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from jukebox_queue.domain.ledger.entities import BalanceTransaction, Payment
from jukebox_queue.domain.queue.entities import QueueItem, QueueSession
from jukebox_queue.domain.queue.value_objects import SessionStatus


class SessionRepository(ABC):
    """Abstract repository for queue sessions and their playback pointer."""

    @abstractmethod
    async def add(self, session: QueueSession) -> QueueSession:
        """Persist a new session.

        Args:
            session: A session built with ``QueueSession.build``.

        Returns:
            The stored session with its assigned id.
        """
        ...

    @abstractmethod
    async def get(self, session_id: int) -> QueueSession | None:
        """Retrieve a session by id.

        Args:
            session_id: The session id.

        Returns:
            The session if found, None otherwise.
        """
        ...

    @abstractmethod
    async def get_open_for_venue(self, venue_id: int) -> QueueSession | None:
        """Get the venue's session that has not ended, if any."""
        ...

    @abstractmethod
    async def save_status(self, session: QueueSession, expected: SessionStatus) -> None:
        """Persist the session's status and ``ended_at``.

        The write only applies while the stored status is still ``expected``,
        so a stale copy can never overwrite a newer transition.

        Args:
            session: The session after a lifecycle transition.
            expected: The status the transition started from.

        Raises:
            SessionNotFoundError: If the session does not exist.
            InvalidOperationError: If the stored status is no longer ``expected``.
        """
        ...

    @abstractmethod
    async def end(self, session: QueueSession, expected: SessionStatus) -> None:
        """Stop playback and persist the ended status as one atomic unit.

        Args:
            session: The session after ``QueueSession.end``.
            expected: The status the session ended from.

        Raises:
            SessionNotFoundError: If the session does not exist.
            InvalidOperationError: If the stored status is no longer ``expected``.
        """
        ...

    @abstractmethod
    async def start_playback(self, session_id: int, item_id: int, now: datetime) -> QueueItem:
        """Atomically make ``item_id`` the only playing item of the session.

        Clears every playing flag in the session, marks the target
        ``playing`` with ``played_at = now``, and points the session at it.
        Either all of it is applied or none.

        Args:
            session_id: The session.
            item_id: A pending item of that session.
            now: Playback start time.

        Returns:
            The item as stored after the transition.

        Raises:
            ItemNotFoundError: If the item is not a pending item of the session.
            TransitionFailureError: If the transition could not be persisted.
        """
        ...

    @abstractmethod
    async def stop_playback(self, session_id: int) -> None:
        """Atomically clear every playing flag and the session's pointer.

        Idempotent.

        Raises:
            TransitionFailureError: If the transition could not be persisted.
        """
        ...


class QueueItemRepository(ABC):
    """Abstract repository for queue items."""

    @abstractmethod
    async def add(
        self,
        item: QueueItem,
        payment: Payment | None = None,
        *,
        place_at: int | None = None,
    ) -> tuple[QueueItem, BalanceTransaction | None]:
        """Store a new item, charging ``payment`` in the same atomic unit.

        Args:
            item: The item to store. Its ``id`` is ignored.
            payment: Optional debit for the purchased position.
            place_at: Display position bought for the item. When set, the
                item's tier and ``inserted_at_position`` are derived from the
                pending items inside the same unit, shifting items ahead of
                the slot when their tiers leave no room.

        Returns:
            The stored item and the debit entry, if any.

        Raises:
            InsufficientBalanceError: If the payer cannot cover the payment;
                nothing is stored or shifted.
        """
        ...

    @abstractmethod
    async def get(self, item_id: int) -> QueueItem | None:
        """Retrieve an item by id."""
        ...

    @abstractmethod
    async def list_for_session(self, session_id: int) -> list[QueueItem]:
        """All items of a session, in insertion order."""
        ...

    @abstractmethod
    async def list_pending(self, session_id: int) -> list[QueueItem]:
        """Unplayed pending items of a session, in insertion order."""
        ...

    @abstractmethod
    async def count_unplayed(self, session_id: int) -> int:
        """Number of pending items with no ``played_at``."""
        ...

    @abstractmethod
    async def get_current(self, session_id: int) -> QueueItem | None:
        """The item flagged as currently playing, if any."""
        ...

    @abstractmethod
    async def apply_vote(self, item_id: int, delta: int) -> int | None:
        """Atomically add ``delta`` to an unplayed item's vote score.

        Args:
            item_id: The item.
            delta: Signed, non-zero change.

        Returns:
            The new score, or None when no unplayed item matched.
        """
        ...

    @abstractmethod
    async def refund(self, item_id: int, amount_cents: int, description: str) -> BalanceTransaction:
        """Credit the item's payer and record the refunded amount atomically.

        Args:
            item_id: A purchased, unplayed item.
            amount_cents: Amount to return; at most the unrefunded payment.
            description: Ledger description.

        Returns:
            The ``refund`` ledger entry.
        """
        ...
