from __future__ import annotations

from typing import Protocol

from novel_chat.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from novel_chat.application.repositories.message import MessageReader, MessageWriter
from novel_chat.application.repositories.outbox import OutboxWriter
from novel_chat.application.repositories.user import UserReader


class UnitOfWork(Protocol):
    conversations: ConversationReader
    conversations_w: ConversationWriter
    messages: MessageReader
    messages_w: MessageWriter
    users: UserReader
    outbox: OutboxWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
