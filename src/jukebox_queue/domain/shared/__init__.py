"""
Shared Domain Kernel

Contains exceptions, constrained types and helpers shared across all bounded contexts.
"""

from jukebox_queue.domain.shared.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    EntityNotFoundError,
    InsufficientBalanceError,
    InsufficientPaymentError,
    InvalidOperationError,
    InvalidPositionError,
    ItemNotFoundError,
    NotAuthorizedError,
    SessionNotFoundError,
    TransitionFailureError,
    UserNotFoundError,
    ValidationError,
    VenueNotFoundError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "SessionNotFoundError",
    "ItemNotFoundError",
    "VenueNotFoundError",
    "UserNotFoundError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "NotAuthorizedError",
    "InsufficientBalanceError",
    "InsufficientPaymentError",
    "InvalidPositionError",
    "TransitionFailureError",
]
