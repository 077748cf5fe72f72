"""Wire format of events on the Pub/Sub channel."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class EventEnvelope(BaseModel):
    event: str
    data: dict[str, Any]


def serialize_event(event_type: str, data: dict[str, Any]) -> str:
    # pydantic renders UUID and datetime values as strings.
    return EventEnvelope(event=event_type, data=data).model_dump_json()


def deserialize_event(raw: str | bytes) -> tuple[str, dict[str, Any]]:
    envelope = EventEnvelope.model_validate_json(raw)
    return envelope.event, envelope.data
