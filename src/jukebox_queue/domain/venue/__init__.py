"""
Venue Bounded Context

Venue configuration and the position Pricing Policy Engine.
"""

from jukebox_queue.domain.venue.entities import Venue
from jukebox_queue.domain.venue.pricing import PricingFactors, PricingPolicy
from jukebox_queue.domain.venue.repository import VenueRepository

__all__ = [
    "Venue",
    "PricingFactors",
    "PricingPolicy",
    "VenueRepository",
]
