from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from novel_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_for_conversations(
        self, conversation_ids: list[UUID]
    ) -> list[Message]:
        """Messages of the given conversations in insertion order."""
        ...


class MessageWriter(Protocol):
    async def append(
        self,
        conversation_id: UUID,
        sender_id: int,
        receiver_id: int,
        text: str,
        created_at: datetime,
    ) -> Message: ...

    async def mark_read(self, conversation_id: UUID, receiver_id: int) -> int:
        """Flag unread messages addressed to ``receiver_id``. Returns rows changed."""
        ...
