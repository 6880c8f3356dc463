"""Formatting helpers for amounts stored in cents."""

from __future__ import annotations

from decimal import Decimal


def format_cents(cents: int) -> str:
    """Render cents as a dollar string, e.g. ``1250 -> "$12.50"``."""
    sign = "-" if cents < 0 else ""
    return f"{sign}${Decimal(abs(cents)) / 100:.2f}"
