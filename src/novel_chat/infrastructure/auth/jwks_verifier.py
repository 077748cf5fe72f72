from __future__ import annotations

import asyncio

import jwt
from jwt import PyJWKClient

from novel_chat.application.dto.principal import Principal
from novel_chat.infrastructure.auth.claims import principal_from_claims


class JWKSVerifier:
    """Verify JWTs using a remote JWKS endpoint."""

    def __init__(self, jwks_url: str) -> None:
        self._jwks_url = jwks_url
        self._jwk_client = PyJWKClient(jwks_url)

    async def verify(self, token: str) -> Principal:
        # PyJWKClient fetches keys over blocking HTTP.
        signing_key = await asyncio.to_thread(
            self._jwk_client.get_signing_key_from_jwt, token,
        )
        payload = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256", "ES256"],
            options={"require": ["sub"]},
        )
        return principal_from_claims(payload)
