from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from novel_chat.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class ThreadDTO:
    """One conversation as seen by one of its participants."""

    user_id: int
    user_name: str
    user_avatar: str
    messages: list[Message]
    last_message_at: datetime
