"""In-process WebSocket connection registry."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

from novel_chat.infrastructure.ws.protocol import WsOutbound

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks open WebSocket connections per principal (one user may have several tabs)."""

    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = {}

    async def connect(self, ws: WebSocket, principal_key: str) -> None:
        await ws.accept()
        self._connections.setdefault(principal_key, set()).add(ws)
        logger.debug("WS connected: %s (total=%d)", principal_key, len(self._connections))

    def disconnect(self, ws: WebSocket, principal_key: str) -> None:
        conns = self._connections.get(principal_key)
        if conns:
            conns.discard(ws)
            if not conns:
                del self._connections[principal_key]
        logger.debug("WS disconnected: %s", principal_key)

    async def send_to_principal(
        self,
        principal_key: str,
        event_type: str,
        data: dict[str, Any],
    ) -> None:
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        dead: list[WebSocket] = []
        for ws in list(self._connections.get(principal_key, set())):
            try:
                await ws.send_text(raw)
            except Exception:
                dead.append(ws)
        for ws in dead:
            self.disconnect(ws, principal_key)
