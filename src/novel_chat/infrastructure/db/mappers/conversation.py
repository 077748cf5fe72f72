from __future__ import annotations

from typing import Any

from novel_chat.domain.entities.conversation import Conversation
from novel_chat.infrastructure.db.models.conversation import ConversationModel


def model_to_entity(model: ConversationModel) -> Conversation:
    return Conversation(
        id=model.id,
        participant_low=model.participant_low,
        participant_high=model.participant_high,
        send_count=model.send_count,
        reset_at=model.reset_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def entity_to_values(entity: Conversation) -> dict[str, Any]:
    return {
        "id": entity.id,
        "participant_low": entity.participant_low,
        "participant_high": entity.participant_high,
        "send_count": entity.send_count,
        "reset_at": entity.reset_at,
        "created_at": entity.created_at,
        "updated_at": entity.updated_at,
    }
