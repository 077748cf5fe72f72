from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from novel_chat.domain.entities.conversation import Conversation


class ConversationReader(Protocol):
    async def get_for_pair(self, user_a: int, user_b: int) -> Conversation | None:
        """Find the conversation of an unordered pair of users."""
        ...

    async def list_for_user(self, user_id: int) -> list[Conversation]:
        """All conversations of a user, most recently active first."""
        ...


class ConversationWriter(Protocol):
    async def create_if_not_exists(self, conversation: Conversation) -> Conversation:
        """Insert conversation. If the pair already has one → return existing."""
        ...

    async def reset_quota(
        self, conversation_id: UUID, observed_reset_at: datetime, ts: datetime,
    ) -> bool:
        """Start a new quota window, unless another request already did.

        Only applies while the stored ``reset_at`` still equals
        ``observed_reset_at``. Returns whether this call reset the window.
        """
        ...

    async def try_consume_quota(self, conversation_id: UUID, limit: int) -> int | None:
        """Atomically increment send_count if it is below ``limit``.

        Returns the new count, or None if the limit was already reached.
        """
        ...

    async def touch(self, conversation_id: UUID, ts: datetime) -> None: ...

    async def delete(self, conversation_id: UUID) -> None: ...
