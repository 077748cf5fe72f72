"""Daily direct-message quota rules.

The counting window is a calendar day in the server timezone. A window is
stale as soon as the current date is later than the date it was opened on,
regardless of how many hours have passed.
"""
from __future__ import annotations

from datetime import datetime, tzinfo


def is_previous_day(now: datetime, reset_at: datetime, tz: tzinfo) -> bool:
    """True if ``reset_at`` falls on a calendar day strictly before ``now``."""
    return reset_at.astimezone(tz).date() < now.astimezone(tz).date()


def remaining_quota(limit: int, send_count: int) -> int:
    return max(0, limit - send_count)
