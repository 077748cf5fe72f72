from __future__ import annotations

from typing import Any, Protocol


class EventPublisher(Protocol):
    """Fan-out of committed outbox events to every API instance."""

    async def publish(self, channel: str, event_type: str, data: dict[str, Any]) -> None: ...
