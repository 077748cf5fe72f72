"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import pytest

from novel_chat.application.dto.principal import Principal
from novel_chat.application.repositories.outbox import OutboxRecord
from novel_chat.domain.entities.conversation import Conversation
from novel_chat.domain.entities.message import Message
from novel_chat.domain.entities.user import UserProfile
from novel_chat.domain.value_objects.enums import Role
from novel_chat.domain.value_objects.ids import participant_pair
from novel_chat.services.direct_message_service import DirectMessageService

ADMIN_ID = 1
CONTRACTOR_ID = 2
USER_ID = 42


@pytest.fixture
def user_principal() -> Principal:
    return Principal(role=Role.USER, user_id=USER_ID)


@pytest.fixture
def contractor_principal() -> Principal:
    return Principal(role=Role.CONTRACTOR, user_id=CONTRACTOR_ID)


@pytest.fixture
def admin_principal() -> Principal:
    return Principal(role=Role.ADMIN, user_id=ADMIN_ID)


@dataclass
class FixedClock:
    """Clock that only moves when told to."""

    current: datetime = field(
        default_factory=lambda: datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
    )

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


def make_conversation(
    user_a: int = USER_ID,
    user_b: int = ADMIN_ID,
    *,
    send_count: int = 0,
    reset_at: datetime | None = None,
    updated_at: datetime | None = None,
) -> Conversation:
    now = datetime.now(timezone.utc)
    low, high = participant_pair(user_a, user_b)
    return Conversation(
        id=uuid.uuid4(),
        participant_low=low,
        participant_high=high,
        send_count=send_count,
        reset_at=reset_at or now,
        created_at=now,
        updated_at=updated_at or now,
    )


@dataclass
class FakeConversationReader:
    _store: dict[UUID, Conversation] = field(default_factory=dict)

    async def get_for_pair(self, user_a: int, user_b: int) -> Conversation | None:
        # Yield so concurrent sends interleave between lookup and write.
        await asyncio.sleep(0)
        pair = participant_pair(user_a, user_b)
        for c in self._store.values():
            if c.participants == pair:
                return c
        return None

    async def list_for_user(self, user_id: int) -> list[Conversation]:
        convs = [c for c in self._store.values() if c.has_participant(user_id)]
        return sorted(convs, key=lambda c: c.updated_at, reverse=True)


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_for_conversations(self, conversation_ids: list[UUID]) -> list[Message]:
        ids = set(conversation_ids)
        return sorted(
            (m for m in self._messages if m.conversation_id in ids),
            key=lambda m: m.id,
        )


@dataclass
class FakeConversationWriter:
    _reader: FakeConversationReader
    _messages: FakeMessageReader

    async def create_if_not_exists(self, conversation: Conversation) -> Conversation:
        for c in self._reader._store.values():
            if c.participants == conversation.participants:
                return c
        self._reader._store[conversation.id] = conversation
        return conversation

    def _replace(self, conversation_id: UUID, **changes: Any) -> Conversation:
        updated = dataclasses.replace(self._reader._store[conversation_id], **changes)
        self._reader._store[conversation_id] = updated
        return updated

    async def reset_quota(
        self, conversation_id: UUID, observed_reset_at: datetime, ts: datetime,
    ) -> bool:
        if self._reader._store[conversation_id].reset_at != observed_reset_at:
            return False
        self._replace(conversation_id, send_count=0, reset_at=ts)
        return True

    async def try_consume_quota(self, conversation_id: UUID, limit: int) -> int | None:
        current = self._reader._store[conversation_id]
        if current.send_count >= limit:
            return None
        return self._replace(conversation_id, send_count=current.send_count + 1).send_count

    async def touch(self, conversation_id: UUID, ts: datetime) -> None:
        self._replace(conversation_id, updated_at=ts)

    async def delete(self, conversation_id: UUID) -> None:
        del self._reader._store[conversation_id]
        self._messages._messages = [
            m for m in self._messages._messages if m.conversation_id != conversation_id
        ]


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    _next_id: int = 1
    fail_on_append: bool = False

    async def append(
        self,
        conversation_id: UUID,
        sender_id: int,
        receiver_id: int,
        text: str,
        created_at: datetime,
    ) -> Message:
        if self.fail_on_append:
            raise ConnectionError("database went away")
        msg = Message(
            id=self._next_id,
            conversation_id=conversation_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            text=text,
            is_read=False,
            created_at=created_at,
        )
        self._next_id += 1
        self._reader._messages.append(msg)
        return msg

    async def mark_read(self, conversation_id: UUID, receiver_id: int) -> int:
        changed = 0
        for i, m in enumerate(self._reader._messages):
            if m.conversation_id == conversation_id and m.receiver_id == receiver_id and not m.is_read:
                self._reader._messages[i] = dataclasses.replace(m, is_read=True)
                changed += 1
        return changed


@dataclass
class FakeUserReader:
    _users: dict[int, UserProfile] = field(default_factory=dict)

    async def get_many(self, user_ids: list[int]) -> dict[int, UserProfile]:
        return {uid: self._users[uid] for uid in user_ids if uid in self._users}


@dataclass
class FakeOutboxWriter:
    _records: list[dict[str, Any]] = field(default_factory=list)
    _pending: list[OutboxRecord] = field(default_factory=list)
    _sent: list[int] = field(default_factory=list)
    _failed: list[tuple[int, datetime, str | None]] = field(default_factory=list)
    _dead: list[int] = field(default_factory=list)

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._records.append({"event_type": event_type, "payload": payload})

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        batch, self._pending = self._pending[:batch_size], self._pending[batch_size:]
        return batch

    async def mark_sent(self, ids: list[int]) -> None:
        self._sent.extend(ids)

    async def mark_failed(
        self, record_id: int, next_retry_at: datetime, error: str | None = None,
    ) -> None:
        self._failed.append((record_id, next_retry_at, error))

    async def mark_dead(self, record_id: int) -> None:
        self._dead.append(record_id)


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests.

    ``rollback`` restores the state of the last commit, so tests can check
    that a failed operation leaves nothing behind.
    """
    conversations: FakeConversationReader = field(default_factory=FakeConversationReader)
    conversations_w: FakeConversationWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    users: FakeUserReader = field(default_factory=FakeUserReader)
    outbox: FakeOutboxWriter = field(default_factory=FakeOutboxWriter)
    _committed: bool = False
    _commit_count: int = 0
    _snapshot: tuple[dict[UUID, Conversation], list[Message], int] | None = None

    def __post_init__(self) -> None:
        if self.conversations_w is None:
            self.conversations_w = FakeConversationWriter(self.conversations, self.messages)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        self._take_snapshot()

    def _take_snapshot(self) -> None:
        self._snapshot = (
            dict(self.conversations._store),
            list(self.messages._messages),
            len(self.outbox._records),
        )

    async def commit(self) -> None:
        self._committed = True
        self._commit_count += 1
        self._take_snapshot()

    async def rollback(self) -> None:
        assert self._snapshot is not None
        store, messages, outbox_len = self._snapshot
        self.conversations._store = dict(store)
        self.messages._messages = list(messages)
        del self.outbox._records[outbox_len:]

    def seed(self, *conversations: Conversation) -> None:
        for c in conversations:
            self.conversations._store[c.id] = c
        self._take_snapshot()


def make_service(
    uow: FakeUoW,
    clock: FixedClock | None = None,
    *,
    privileged_user_id: int | None = ADMIN_ID,
    **kwargs: Any,
) -> DirectMessageService:
    return DirectMessageService(
        uow,
        privileged_user_id=privileged_user_id,
        clock=clock or FixedClock(),
        **kwargs,
    )
