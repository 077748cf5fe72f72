from __future__ import annotations

from dataclasses import dataclass

from novel_chat.domain.value_objects.enums import Role


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity extracted from JWT."""

    role: Role
    user_id: int

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def principal_key(self) -> str:
        """Unique key for WS connection registry."""
        return f"user:{self.user_id}"
