"""Centralized constants for SQLite pragmas, pricing and other shared values.

This module provides reusable constants that reduce magic strings and improve maintainability.
"""

from __future__ import annotations


class SQLPragmas:
    """SQLite PRAGMA statements."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"


class PricingConstants:
    """Defaults for venue pricing and the quoted price list."""

    DEFAULT_BASE_PRICE_CENTS = 100
    DEFAULT_MIN_PRICE_CENTS = 1
    DEFAULT_MAX_PRICE_CENTS = 50_000
    DEFAULT_PEAK_HOURS_START = 19
    DEFAULT_PEAK_HOURS_END = 23
    DEFAULT_QUOTED_POSITIONS = 10


class LedgerConstants:
    """Default ledger entry descriptions and the welcome balance."""

    INITIAL_BALANCE_CENTS = 10_000
    INITIAL_DESCRIPTION = "Welcome bonus"
    DEBIT_DESCRIPTION = "Queue payment"
    REFUND_DESCRIPTION = "Queue refund"


class JoinCodeConstants:
    LENGTH = 6
    MAX_ATTEMPTS = 50
