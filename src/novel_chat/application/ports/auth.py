from __future__ import annotations

from typing import Protocol

from novel_chat.application.dto.principal import Principal


class TokenVerifier(Protocol):
    """Turns a bearer token into the calling user.

    ``sub`` carries the numeric user id and ``role`` one of user,
    contractor or admin. Implementations raise on any invalid token.
    """

    async def verify(self, token: str) -> Principal: ...
