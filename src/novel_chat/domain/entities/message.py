from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Message:
    id: int
    conversation_id: UUID
    sender_id: int
    receiver_id: int
    text: str
    is_read: bool
    created_at: datetime
