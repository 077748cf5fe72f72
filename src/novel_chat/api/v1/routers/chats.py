from __future__ import annotations

from fastapi import APIRouter, status

from novel_chat.api.deps import CurrentAdmin, CurrentPrincipal, DMServiceDep
from novel_chat.api.v1.schemas.chat import (
    MessageResponse,
    QuotaResponse,
    SendMessageRequest,
    ThreadResponse,
)

router = APIRouter(prefix="/api/chats", tags=["chats"])


@router.get("/threads", response_model=list[ThreadResponse])
async def list_threads(
    principal: CurrentPrincipal,
    service: DMServiceDep,
) -> list[ThreadResponse]:
    threads = await service.get_threads(principal)
    return [ThreadResponse.from_dto(t) for t in threads]


@router.post("/send", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    service: DMServiceDep,
) -> MessageResponse:
    msg = await service.send(principal, body.receiver_id, body.text)
    return MessageResponse.model_validate(msg)


@router.put("/threads/{other_user_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_thread_read(
    other_user_id: int,
    principal: CurrentPrincipal,
    service: DMServiceDep,
) -> None:
    await service.mark_read(principal, other_user_id)


@router.get("/limit", response_model=QuotaResponse)
async def get_message_limit(
    principal: CurrentPrincipal,
    service: DMServiceDep,
) -> QuotaResponse:
    return QuotaResponse.from_dto(await service.get_quota(principal))


@router.delete("/threads/{other_user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_thread(
    other_user_id: int,
    admin: CurrentAdmin,
    service: DMServiceDep,
) -> None:
    await service.delete_conversation(admin, other_user_id)
