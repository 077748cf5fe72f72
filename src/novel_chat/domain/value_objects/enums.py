from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    USER = "user"
    CONTRACTOR = "contractor"
    ADMIN = "admin"

    @property
    def is_rate_limited(self) -> bool:
        return self is Role.USER
