"""Centralized message constants for error messages, validation, and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Venue Validation Errors
    PRICE_BOUNDS_INVERTED = "min_price_cents ({min}) must not exceed max_price_cents ({max})"
    UNKNOWN_TIMEZONE = "Unknown timezone: {timezone}"

    # Pricing Errors
    INVALID_POSITION_EXPONENT = "position_exponent must be positive"

    # Ledger Validation Errors
    AMOUNT_MUST_BE_POSITIVE = "Amount must be a positive number of cents"
    INITIAL_BALANCE_NEGATIVE = "Initial balance cannot be negative"

    # Queue Validation Errors
    ZERO_VOTE_DELTA = "Vote delta must be non-zero"
    REFUND_EXCEEDS_PAYMENT = "Refund of {amount} cents exceeds the refundable {refundable} cents"
    ITEM_NOT_REFUNDABLE = "Item {item_id} has no payer to refund"
    NOTHING_TO_REFUND = "Item {item_id} has nothing left to refund"
    JOIN_CODES_EXHAUSTED = "Could not allocate a unique join code"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Configuration Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Session Lifecycle
    SESSION_CREATED = "Created session %s for venue %s (join code %s)"
    SESSION_TRANSITIONED = "Session %s transitioned %s -> %s"
    SESSION_CREATE_REJECTED = "Venue %s already has open session %s"
    SESSION_STATUS_CONFLICT = "Session %s changed from %s before %s could be saved"

    # Playback
    PLAYBACK_STARTED = "Session %s now playing item %s"
    PLAYBACK_STOPPED = "Session %s playback stopped"
    PLAYBACK_QUEUE_EMPTY = "Session %s has no pending items; stopping playback"
    PLAYBACK_TRANSITION_FAILED = "Playback transition %s failed for session %s"

    # Queue Items
    ITEM_SUBMITTED = "Item %s '%s' added to session %s (priority %s, paid %s cents)"
    ITEM_PLACED = "Session %s purchase placed at position %s (priority %s, %s items shifted)"
    ITEM_VOTED = "Item %s vote score is now %s"
    ITEM_REFUNDED = "Refunded %s cents to user %s for item %s"
    PAYMENT_REJECTED = "Payment rejected for session %s: declared %s cents, quoted %s cents"

    # Ledger
    LEDGER_DEBITED = "Debited %s cents from user %s (balance %s)"
    LEDGER_CREDITED = "Credited %s cents to user %s as %s (balance %s)"
    LEDGER_DEBIT_REJECTED = "Debit of %s cents rejected for user %s"
    LEDGER_USER_CREATED = "Created user %s with initial balance %s cents"
    LEDGER_RECONCILE_MISMATCH = "Ledger mismatch for user %s: stored %s, derived %s"

    # Venues
    VENUE_CREATED = "Created venue %s '%s' hosted by user %s"

    # Application Lifecycle
    APP_STARTING = "Starting jukebox queue in %s environment"
    APP_COMMAND_FAILED = "Command %s failed: %s"
