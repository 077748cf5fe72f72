from __future__ import annotations

from novel_chat.domain.entities.user import UserProfile
from novel_chat.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> UserProfile:
    return UserProfile(
        id=model.id,
        username=model.username,
        name=model.name,
        picture=model.picture,
        role=model.role,
    )
