from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from novel_chat.domain.entities.conversation import Conversation
from novel_chat.domain.value_objects.ids import participant_pair
from novel_chat.infrastructure.db.mappers import conversation as mapper
from novel_chat.infrastructure.db.models.conversation import ConversationModel


class ConversationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_pair(self, user_a: int, user_b: int) -> Conversation | None:
        low, high = participant_pair(user_a, user_b)
        # Re-reads after a lost reset race must see the committed row, not the
        # copy already in the session.
        stmt = (
            select(ConversationModel)
            .where(
                ConversationModel.participant_low == low,
                ConversationModel.participant_high == high,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_for_user(self, user_id: int) -> list[Conversation]:
        stmt = (
            select(ConversationModel)
            .where(
                or_(
                    ConversationModel.participant_low == user_id,
                    ConversationModel.participant_high == user_id,
                )
            )
            .order_by(ConversationModel.updated_at.desc(), ConversationModel.id)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class ConversationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_if_not_exists(self, conversation: Conversation) -> Conversation:
        stmt = (
            pg_insert(ConversationModel)
            .values(**mapper.entity_to_values(conversation))
            .on_conflict_do_nothing(constraint="uq_conversation_pair")
            .returning(ConversationModel)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is not None:
            return mapper.model_to_entity(row)

        # Lost the race to a concurrent first message: use the winner's row.
        stmt = select(ConversationModel).where(
            ConversationModel.participant_low == conversation.participant_low,
            ConversationModel.participant_high == conversation.participant_high,
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def reset_quota(
        self, conversation_id: UUID, observed_reset_at: datetime, ts: datetime,
    ) -> bool:
        stmt = (
            update(ConversationModel)
            .where(
                ConversationModel.id == conversation_id,
                ConversationModel.reset_at == observed_reset_at,
            )
            .values(send_count=0, reset_at=ts)
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    async def try_consume_quota(self, conversation_id: UUID, limit: int) -> int | None:
        stmt = (
            update(ConversationModel)
            .where(
                ConversationModel.id == conversation_id,
                ConversationModel.send_count < limit,
            )
            .values(send_count=ConversationModel.send_count + 1)
            .returning(ConversationModel.send_count)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def touch(self, conversation_id: UUID, ts: datetime) -> None:
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == conversation_id)
            .values(updated_at=ts)
        )
        await self._session.execute(stmt)

    async def delete(self, conversation_id: UUID) -> None:
        # Messages go with it through ON DELETE CASCADE.
        stmt = delete(ConversationModel).where(ConversationModel.id == conversation_id)
        await self._session.execute(stmt)
