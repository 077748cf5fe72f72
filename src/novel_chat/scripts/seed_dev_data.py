"""Seed development data: creates tables, demo accounts and one conversation."""
from __future__ import annotations

import asyncio
import logging

from sqlalchemy.dialects.postgresql import insert as pg_insert

from novel_chat.application.dto.principal import Principal
from novel_chat.config import settings
from novel_chat.domain.value_objects.enums import Role
from novel_chat.infrastructure.db.base import Base
from novel_chat.infrastructure.db.models import UserModel
from novel_chat.infrastructure.db.session import AsyncSessionLocal, engine
from novel_chat.infrastructure.db.uow import SqlAlchemyUoW
from novel_chat.services.direct_message_service import DirectMessageService

logger = logging.getLogger(__name__)

ADMIN_ID = 1

USERS = [
    {"id": ADMIN_ID, "username": "admin", "name": "Site Owner", "role": Role.ADMIN},
    {"id": 2, "username": "translator", "name": "Translator", "role": Role.CONTRACTOR},
    {"id": 42, "username": "reader", "name": "Reader", "role": Role.USER},
]


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created")

    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        await session.execute(
            pg_insert(UserModel).values(USERS).on_conflict_do_nothing(index_elements=["id"])
        )
        await uow.commit()

        if settings.PRIVILEGED_USER_ID != ADMIN_ID:
            logger.warning(
                "PRIVILEGED_USER_ID is %s, set it to %d to use the seeded admin",
                settings.PRIVILEGED_USER_ID,
                ADMIN_ID,
            )

        service = DirectMessageService(uow, privileged_user_id=ADMIN_ID)
        reader = Principal(role=Role.USER, user_id=42)
        admin = Principal(role=Role.ADMIN, user_id=ADMIN_ID)

        await service.send(reader, None, "Hello! When is the next chapter coming out?")
        await service.send(admin, 42, "Hi! It is scheduled for Friday.")
        await service.send(Principal(role=Role.CONTRACTOR, user_id=2), 42, "Thanks for reading!")

        quota = await service.get_quota(reader)
        logger.info("Seeded demo conversations, reader has %d messages left today", quota.remaining)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
