"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from novel_chat.application.dto.principal import Principal
from novel_chat.application.ports.auth import TokenVerifier
from novel_chat.application.uow import UnitOfWork
from novel_chat.config import settings
from novel_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from novel_chat.infrastructure.auth.jwks_verifier import JWKSVerifier
from novel_chat.infrastructure.db.session import AsyncSessionLocal
from novel_chat.infrastructure.db.uow import SqlAlchemyUoW
from novel_chat.services.direct_message_service import DirectMessageService

_bearer_scheme = HTTPBearer()


async def get_uow() -> AsyncIterator[UnitOfWork]:
    async with AsyncSessionLocal() as session:
        async with SqlAlchemyUoW(session) as uow:
            yield uow


UoWDep = Annotated[UnitOfWork, Depends(get_uow)]


def _get_verifier() -> TokenVerifier:
    if settings.JWT_VERIFY_MODE == "jwks":
        assert settings.JWKS_URL, "JWKS_URL must be set when JWT_VERIFY_MODE=jwks"
        return JWKSVerifier(settings.JWKS_URL)
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = _get_verifier()
    return _verifier


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
) -> Principal:
    verifier = get_verifier()
    try:
        return await verifier.verify(credentials.credentials)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def get_current_admin(principal: CurrentPrincipal) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return principal


CurrentAdmin = Annotated[Principal, Depends(get_current_admin)]


def get_dm_service(uow: UoWDep) -> DirectMessageService:
    return DirectMessageService(
        uow,
        privileged_user_id=settings.PRIVILEGED_USER_ID,
        daily_limit=settings.DM_DAILY_LIMIT,
        tz=ZoneInfo(settings.QUOTA_TIMEZONE),
    )


DMServiceDep = Annotated[DirectMessageService, Depends(get_dm_service)]
