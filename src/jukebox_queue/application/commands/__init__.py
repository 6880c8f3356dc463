"""
Application Commands (CQRS Write Side)

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from jukebox_queue.application.commands.cast_vote import CastVoteCommand, CastVoteResult
from jukebox_queue.application.commands.refund_item import RefundItemCommand, RefundItemResult
from jukebox_queue.application.commands.submit_item import SubmitItemCommand, SubmitItemResult

__all__ = [
    # Submit
    "SubmitItemCommand",
    "SubmitItemResult",
    # Vote
    "CastVoteCommand",
    "CastVoteResult",
    # Refund
    "RefundItemCommand",
    "RefundItemResult",
]
