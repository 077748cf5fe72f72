from __future__ import annotations

import jwt

from novel_chat.application.dto.principal import Principal
from novel_chat.infrastructure.auth.claims import principal_from_claims


class HS256Verifier:
    """Shared-secret verification, used when the platform backend signs tokens itself."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> Principal:
        payload = jwt.decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            options={"require": ["sub"]},
        )
        return principal_from_claims(payload)
