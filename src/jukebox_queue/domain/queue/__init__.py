"""
Queue Bounded Context

Sessions, queue items, the Ordering Engine and placement rules.
"""

from jukebox_queue.domain.queue.entities import QueueItem, QueueSession
from jukebox_queue.domain.queue.repository import QueueItemRepository, SessionRepository
from jukebox_queue.domain.queue.services import QueueDomainService
from jukebox_queue.domain.queue.value_objects import (
    CatalogTrack,
    DesiredPosition,
    ItemStatus,
    SessionStatus,
)

__all__ = [
    # Entities
    "QueueItem",
    "QueueSession",
    # Value Objects
    "CatalogTrack",
    "DesiredPosition",
    "ItemStatus",
    "SessionStatus",
    # Repositories
    "QueueItemRepository",
    "SessionRepository",
    # Services
    "QueueDomainService",
]
