from __future__ import annotations

from datetime import datetime

from pydantic import computed_field

from novel_chat.api.v1.schemas.common import CamelModel
from novel_chat.application.dto.quota import QuotaDTO
from novel_chat.application.dto.thread import ThreadDTO


def _epoch_ms(ts: datetime) -> int:
    return int(ts.timestamp() * 1000)


class SendMessageRequest(CamelModel):
    # Both optional so that missing values surface as a 400 from the service.
    text: str | None = None
    receiver_id: int | None = None


class MessageResponse(CamelModel):
    id: int
    sender_id: int
    receiver_id: int
    text: str
    is_read: bool
    created_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def timestamp(self) -> int:
        return _epoch_ms(self.created_at)


class ThreadResponse(CamelModel):
    id: int
    user_id: int
    user_name: str
    user_avatar: str
    messages: list[MessageResponse]
    last_message_timestamp: int

    @classmethod
    def from_dto(cls, thread: ThreadDTO) -> ThreadResponse:
        return cls(
            id=thread.user_id,
            user_id=thread.user_id,
            user_name=thread.user_name,
            user_avatar=thread.user_avatar,
            messages=[MessageResponse.model_validate(m) for m in thread.messages],
            last_message_timestamp=_epoch_ms(thread.last_message_at),
        )


class QuotaResponse(CamelModel):
    limit: int
    remaining: int

    @classmethod
    def from_dto(cls, quota: QuotaDTO) -> QuotaResponse:
        return cls(limit=quota.limit, remaining=quota.remaining)
