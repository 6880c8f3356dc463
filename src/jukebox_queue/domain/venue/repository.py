"""
Venue Repository Interface

Abstract base class defining the persistence contract for venues.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from jukebox_queue.domain.venue.entities import Venue


class VenueRepository(ABC):
    """Abstract repository for venue configuration."""

    @abstractmethod
    async def add(self, venue: Venue) -> Venue:
        """Persist a new venue.

        Args:
            venue: The venue to store. Its ``id`` is ignored.

        Returns:
            The stored venue with its assigned id.
        """
        ...

    @abstractmethod
    async def get(self, venue_id: int) -> Venue | None:
        """Retrieve a venue by id.

        Args:
            venue_id: The venue id.

        Returns:
            The venue if found, None otherwise.
        """
        ...
