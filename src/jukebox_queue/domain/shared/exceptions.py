"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class EntityNotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, identifier: str | int, message: str | None = None) -> None:
        msg = message or f"{entity_type} with id '{identifier}' not found"
        super().__init__(msg, code="ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class SessionNotFoundError(EntityNotFoundError):
    def __init__(self, session_id: str | int) -> None:
        super().__init__("QueueSession", session_id)
        self.code = "SESSION_NOT_FOUND"


class ItemNotFoundError(EntityNotFoundError):
    def __init__(self, item_id: str | int) -> None:
        super().__init__("QueueItem", item_id)
        self.code = "ITEM_NOT_FOUND"


class VenueNotFoundError(EntityNotFoundError):
    def __init__(self, venue_id: str | int) -> None:
        super().__init__("Venue", venue_id)
        self.code = "VENUE_NOT_FOUND"


class UserNotFoundError(EntityNotFoundError):
    def __init__(self, user_id: str | int) -> None:
        super().__init__("User", user_id)
        self.code = "USER_NOT_FOUND"


class BusinessRuleViolationError(DomainError):
    """Raised when a business rule is violated."""

    def __init__(self, rule: str, message: str | None = None) -> None:
        msg = message or f"Business rule violated: {rule}"
        super().__init__(msg, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class NotAuthorizedError(DomainError):
    """Raised when a user attempts a host-only action on a venue they do not host."""

    def __init__(self, user_id: int, action: str) -> None:
        super().__init__(f"User {user_id} may not {action}", code="NOT_AUTHORIZED")
        self.user_id = user_id
        self.action = action


class InsufficientBalanceError(DomainError):
    """Raised when a debit exceeds the user's balance (payment required)."""

    def __init__(self, user_id: int, required_cents: int, balance_cents: int | None = None) -> None:
        if balance_cents is None:
            msg = f"Insufficient balance for user {user_id}: {required_cents} cents required"
        else:
            msg = (
                f"Insufficient balance for user {user_id}: "
                f"{required_cents} cents required, {balance_cents} available"
            )
        super().__init__(msg, code="INSUFFICIENT_BALANCE")
        self.user_id = user_id
        self.required_cents = required_cents
        self.balance_cents = balance_cents


class InsufficientPaymentError(DomainError):
    """Raised when a client-declared payment is below the quoted price."""

    def __init__(self, paid_cents: int, quoted_cents: int) -> None:
        super().__init__(
            f"Payment of {paid_cents} cents is below the quoted price of {quoted_cents} cents",
            code="INSUFFICIENT_PAYMENT",
        )
        self.paid_cents = paid_cents
        self.quoted_cents = quoted_cents


class InvalidPositionError(DomainError):
    """Raised for a non-positive or malformed desired queue position."""

    def __init__(self, position: object) -> None:
        super().__init__(f"Invalid queue position: {position!r}", code="INVALID_POSITION")
        self.position = position


class TransitionFailureError(DomainError):
    """Raised when a playback transition could not be persisted.

    Indicates a storage or invariant problem. Never retried automatically.
    """

    def __init__(self, operation: str, session_id: int) -> None:
        super().__init__(
            f"Playback transition '{operation}' failed for session {session_id}",
            code="TRANSITION_FAILURE",
        )
        self.operation = operation
        self.session_id = session_id
