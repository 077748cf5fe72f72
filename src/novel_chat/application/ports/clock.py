from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Time source for message timestamps and the daily quota window.

    ``now`` must return an aware datetime; the quota converts it to the
    configured timezone before comparing calendar dates.
    """

    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
