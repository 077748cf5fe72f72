from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from novel_chat.application.repositories.outbox import OutboxRecord
from novel_chat.infrastructure.db.models.outbox import OutboxMessageModel


class OutboxWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        conversation_id = payload.get("conversation_id")
        model = OutboxMessageModel(
            event_type=event_type,
            aggregate_id=UUID(conversation_id) if conversation_id else None,
            payload=payload,
        )
        self._session.add(model)
        await self._session.flush()

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        stmt = (
            select(OutboxMessageModel)
            .where(
                OutboxMessageModel.status.in_(["pending", "failed"]),
                (
                    OutboxMessageModel.next_retry_at.is_(None)
                    | (OutboxMessageModel.next_retry_at <= datetime.now(timezone.utc))
                ),
            )
            .order_by(OutboxMessageModel.id.asc())
            .limit(batch_size)
            .with_for_update(skip_locked=True)
        )
        result = await self._session.execute(stmt)
        rows = result.scalars().all()

        if rows:
            await self._session.execute(
                update(OutboxMessageModel)
                .where(OutboxMessageModel.id.in_([r.id for r in rows]))
                .values(status="processing")
            )
            await self._session.flush()

        return [
            OutboxRecord(
                id=r.id,
                event_type=r.event_type,
                payload=r.payload,
                attempts=r.attempts,
            )
            for r in rows
        ]

    async def mark_sent(self, ids: list[int]) -> None:
        if not ids:
            return
        stmt = (
            update(OutboxMessageModel)
            .where(OutboxMessageModel.id.in_(ids))
            .values(status="sent", last_error=None)
        )
        await self._session.execute(stmt)

    async def mark_failed(
        self, record_id: int, next_retry_at: datetime, error: str | None = None,
    ) -> None:
        stmt = (
            update(OutboxMessageModel)
            .where(OutboxMessageModel.id == record_id)
            .values(
                status="failed",
                attempts=OutboxMessageModel.attempts + 1,
                next_retry_at=next_retry_at,
                last_error=error,
            )
        )
        await self._session.execute(stmt)

    async def mark_dead(self, record_id: int) -> None:
        stmt = (
            update(OutboxMessageModel)
            .where(OutboxMessageModel.id == record_id)
            .values(status="dead")
        )
        await self._session.execute(stmt)
