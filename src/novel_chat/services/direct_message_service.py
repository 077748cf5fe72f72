from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone, tzinfo
from uuid import UUID

from novel_chat.application.dto.principal import Principal
from novel_chat.application.dto.quota import QuotaDTO
from novel_chat.application.dto.thread import ThreadDTO
from novel_chat.application.exceptions import (
    NotFoundError,
    QuotaExceededError,
    ServerConfigurationError,
    ValidationError,
)
from novel_chat.application.policies.permissions import assert_admin, resolve_receiver
from novel_chat.application.policies.quota import is_previous_day, remaining_quota
from novel_chat.application.ports.clock import Clock, SystemClock
from novel_chat.application.uow import UnitOfWork
from novel_chat.domain.entities.conversation import Conversation
from novel_chat.domain.entities.message import Message
from novel_chat.domain.value_objects.ids import participant_pair

logger = logging.getLogger(__name__)

DAILY_LIMIT = 5

MESSAGE_CREATED = "chat.message_created"


class DirectMessageService:
    """Direct messages between two users, with a daily quota for regular users.

    Regular users may only talk to the privileged (site owner) account and
    are limited to ``daily_limit`` messages per calendar day. Contractors and
    admins are unlimited and may write to anyone.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        privileged_user_id: int | None,
        daily_limit: int = DAILY_LIMIT,
        tz: tzinfo = timezone.utc,
        clock: Clock | None = None,
    ) -> None:
        self._uow = uow
        self._privileged_user_id = privileged_user_id
        self._daily_limit = daily_limit
        self._tz = tz
        self._clock = clock or SystemClock()

    def _require_privileged_user(self) -> int:
        if self._privileged_user_id is None:
            logger.error("PRIVILEGED_USER_ID is not configured, direct messaging is unavailable")
            raise ServerConfigurationError("Admin user not found or not configured.")
        return self._privileged_user_id

    async def send(
        self,
        principal: Principal,
        receiver_id: int | None,
        text: str | None,
    ) -> Message:
        privileged_user_id = self._require_privileged_user()
        receiver_id = resolve_receiver(principal, receiver_id, privileged_user_id)

        if not text or not text.strip() or receiver_id is None:
            raise ValidationError("Text and receiverId are required.")
        if receiver_id == principal.user_id:
            raise ValidationError("Cannot send message to yourself.")

        now = self._clock.now()
        conversation = await self._get_or_create(principal.user_id, receiver_id, now)

        if principal.role.is_rate_limited:
            await self._consume_quota(conversation, principal, now)

        msg = await self._uow.messages_w.append(
            conversation.id, principal.user_id, receiver_id, text, now,
        )
        await self._uow.conversations_w.touch(conversation.id, now)
        await self._uow.outbox.add(
            MESSAGE_CREATED,
            {
                "message_id": msg.id,
                "conversation_id": str(msg.conversation_id),
                "sender_id": msg.sender_id,
                "receiver_id": msg.receiver_id,
                "text": msg.text,
                "created_at": msg.created_at.isoformat(),
            },
        )
        await self._uow.commit()
        return msg

    async def _get_or_create(
        self, sender_id: int, receiver_id: int, now: datetime,
    ) -> Conversation:
        existing = await self._uow.conversations.get_for_pair(sender_id, receiver_id)
        if existing is not None:
            return existing

        low, high = participant_pair(sender_id, receiver_id)
        return await self._uow.conversations_w.create_if_not_exists(
            Conversation(
                id=uuid.uuid4(),
                participant_low=low,
                participant_high=high,
                send_count=0,
                reset_at=now,
                created_at=now,
                updated_at=now,
            )
        )

    async def _consume_quota(
        self, conversation: Conversation, principal: Principal, now: datetime,
    ) -> None:
        if is_previous_day(now, conversation.reset_at, self._tz):
            # No-op if a concurrent request already opened today's window.
            await self._uow.conversations_w.reset_quota(
                conversation.id, conversation.reset_at, now,
            )

        count = await self._uow.conversations_w.try_consume_quota(
            conversation.id, self._daily_limit,
        )
        if count is None:
            logger.info("User %s reached the daily message limit", principal.user_id)
            raise QuotaExceededError(
                f"You have reached the limit of {self._daily_limit} messages per day. "
                "Please come back tomorrow.",
                limit=self._daily_limit,
            )

    async def get_threads(self, principal: Principal) -> list[ThreadDTO]:
        user_id = principal.user_id
        conversations = await self._uow.conversations.list_for_user(user_id)
        if not conversations:
            return []

        by_conversation: dict[UUID, list[Message]] = defaultdict(list)
        for msg in await self._uow.messages.list_for_conversations(
            [c.id for c in conversations]
        ):
            by_conversation[msg.conversation_id].append(msg)

        profiles = await self._uow.users.get_many(
            [c.other_participant(user_id) for c in conversations]
        )

        threads: list[ThreadDTO] = []
        for conv in conversations:
            other_id = conv.other_participant(user_id)
            profile = profiles.get(other_id)
            messages = by_conversation[conv.id]
            threads.append(
                ThreadDTO(
                    user_id=other_id,
                    user_name=(profile.name or profile.username) if profile else "",
                    user_avatar=(profile.picture or "") if profile else "",
                    messages=messages,
                    last_message_at=messages[-1].created_at if messages else conv.updated_at,
                )
            )
        return threads

    async def mark_read(self, principal: Principal, other_user_id: int) -> None:
        conversation = await self._uow.conversations.get_for_pair(
            principal.user_id, other_user_id,
        )
        if conversation is None:
            return

        updated = await self._uow.messages_w.mark_read(conversation.id, principal.user_id)
        if updated:
            await self._uow.commit()

    async def get_quota(self, principal: Principal) -> QuotaDTO:
        if not principal.role.is_rate_limited:
            return QuotaDTO.unlimited()

        privileged_user_id = self._require_privileged_user()
        conversation = await self._uow.conversations.get_for_pair(
            principal.user_id, privileged_user_id,
        )
        if conversation is None:
            return QuotaDTO(limit=self._daily_limit, remaining=self._daily_limit)

        send_count = conversation.send_count
        now = self._clock.now()
        if is_previous_day(now, conversation.reset_at, self._tz):
            if await self._uow.conversations_w.reset_quota(
                conversation.id, conversation.reset_at, now,
            ):
                await self._uow.commit()
                send_count = 0
            else:
                current = await self._uow.conversations.get_for_pair(
                    principal.user_id, privileged_user_id,
                )
                send_count = current.send_count if current else 0

        return QuotaDTO(
            limit=self._daily_limit,
            remaining=remaining_quota(self._daily_limit, send_count),
        )

    async def delete_conversation(self, principal: Principal, other_user_id: int) -> None:
        assert_admin(principal)
        conversation = await self._uow.conversations.get_for_pair(
            principal.user_id, other_user_id,
        )
        if conversation is None:
            raise NotFoundError("Conversation not found")

        await self._uow.conversations_w.delete(conversation.id)
        await self._uow.commit()
        logger.info(
            "Conversation %s deleted by admin %s", conversation.id, principal.user_id,
        )
