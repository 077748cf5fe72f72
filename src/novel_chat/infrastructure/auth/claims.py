from __future__ import annotations

from typing import Any

from novel_chat.application.dto.principal import Principal
from novel_chat.domain.value_objects.enums import Role


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    """Build a Principal from decoded token claims.

    ``sub`` is the numeric user id; an unknown or missing ``role`` falls back
    to the rate-limited user role.
    """
    role_raw = payload.get("role", Role.USER)
    role = Role(role_raw) if role_raw in Role.__members__.values() else Role.USER
    return Principal(role=role, user_id=int(payload["sub"]))
