"""
Application Queries (CQRS Read Side)

Query objects and their handlers for read operations.
Queries never modify system state.
"""

from jukebox_queue.application.queries.get_prices import (
    CurrentPricesView,
    PositionPriceView,
    PositionQuote,
)
from jukebox_queue.application.queries.get_queue import GetQueueQuery, QueueView

__all__ = [
    # Queue
    "GetQueueQuery",
    "QueueView",
    # Pricing
    "CurrentPricesView",
    "PositionPriceView",
    "PositionQuote",
]
