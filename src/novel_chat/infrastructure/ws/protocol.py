"""WebSocket frames.

The socket is receive-only for chat traffic: new messages arrive as
``chat.message_created`` frames, and clients may only send ``ping``.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class WsInbound(BaseModel):
    type: str
    data: dict[str, Any] = {}


class WsOutbound(BaseModel):
    type: Literal["chat.message_created", "error", "pong"]
    data: dict[str, Any] = {}

    @classmethod
    def pong(cls) -> WsOutbound:
        return cls(type="pong")

    @classmethod
    def error(cls, code: str, **extra: Any) -> WsOutbound:
        return cls(type="error", data={"code": code, **extra})
