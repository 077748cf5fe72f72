from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from novel_chat.domain.entities.message import Message
from novel_chat.infrastructure.db.mappers import message as mapper
from novel_chat.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_conversations(self, conversation_ids: list[UUID]) -> list[Message]:
        if not conversation_ids:
            return []
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id.in_(conversation_ids))
            .order_by(MessageModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(
        self,
        conversation_id: UUID,
        sender_id: int,
        receiver_id: int,
        text: str,
        created_at: datetime,
    ) -> Message:
        stmt = (
            insert(MessageModel)
            .values(
                conversation_id=conversation_id,
                sender_id=sender_id,
                receiver_id=receiver_id,
                text=text,
                is_read=False,
                created_at=created_at,
            )
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def mark_read(self, conversation_id: UUID, receiver_id: int) -> int:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.conversation_id == conversation_id,
                MessageModel.receiver_id == receiver_id,
                MessageModel.is_read.is_(False),
            )
            .values(is_read=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0
