from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Conversation:
    """Direct-message thread between exactly two users.

    The pair is stored normalized (``participant_low <= participant_high``)
    so there is at most one conversation per unordered pair.
    """

    id: UUID
    participant_low: int
    participant_high: int
    send_count: int
    reset_at: datetime
    created_at: datetime
    updated_at: datetime

    @property
    def participants(self) -> tuple[int, int]:
        return (self.participant_low, self.participant_high)

    def has_participant(self, user_id: int) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: int) -> int:
        if user_id == self.participant_low:
            return self.participant_high
        return self.participant_low
