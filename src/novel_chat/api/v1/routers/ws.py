"""Push channel for new direct messages.

Clients only receive events here; sending still goes through ``POST /api/chats/send``.
"""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from novel_chat.api.deps import get_verifier
from novel_chat.application.dto.principal import Principal
from novel_chat.config import settings
from novel_chat.infrastructure.ws.manager import ConnectionManager
from novel_chat.infrastructure.ws.protocol import WsInbound, WsOutbound

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

manager = ConnectionManager()


def get_manager() -> ConnectionManager:
    return manager


async def _authenticate(token: str) -> Principal | None:
    try:
        return await get_verifier().verify(token)
    except Exception:
        logger.debug("WS auth failed", exc_info=True)
        return None


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    token: str = Query(...),
) -> None:
    principal = await _authenticate(token)
    if principal is None:
        await websocket.close(code=4001, reason="Authentication failed")
        return

    pkey = principal.principal_key
    await manager.connect(websocket, pkey)

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{pkey}",
    )
    try:
        await _read_loop(websocket)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", pkey)
    finally:
        heartbeat_task.cancel()
        manager.disconnect(websocket, pkey)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound.pong().model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("WS heartbeat stopped", exc_info=True)


async def _read_loop(ws: WebSocket) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except PydanticValidationError:
            await ws.send_text(
                WsOutbound.error("invalid_payload").model_dump_json()
            )
            continue

        if msg.type == "ping":
            await ws.send_text(WsOutbound.pong().model_dump_json())
        else:
            await ws.send_text(
                WsOutbound.error("unknown_type", type=msg.type).model_dump_json()
            )
