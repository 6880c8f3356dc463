"""SQLite repository implementations."""

from jukebox_queue.infrastructure.persistence.repositories.join_code_registry import (
    SQLiteJoinCodeRegistry,
)
from jukebox_queue.infrastructure.persistence.repositories.ledger_repository import (
    SQLiteLedgerRepository,
)
from jukebox_queue.infrastructure.persistence.repositories.queue_item_repository import (
    SQLiteQueueItemRepository,
)
from jukebox_queue.infrastructure.persistence.repositories.session_repository import (
    SQLiteSessionRepository,
)
from jukebox_queue.infrastructure.persistence.repositories.venue_repository import (
    SQLiteVenueRepository,
)

__all__ = [
    "SQLiteJoinCodeRegistry",
    "SQLiteLedgerRepository",
    "SQLiteQueueItemRepository",
    "SQLiteSessionRepository",
    "SQLiteVenueRepository",
]
