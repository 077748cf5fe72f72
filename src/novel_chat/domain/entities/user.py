from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Public identity of a platform account, as shown next to a thread."""

    id: int
    username: str
    name: str | None
    picture: str | None
    role: str
