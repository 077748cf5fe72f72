from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from novel_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from novel_chat.api.middleware.timing import RequestTimingMiddleware
from novel_chat.api.v1.routers import chats, health, ws
from novel_chat.application.exceptions import (
    AuthorizationError,
    NotFoundError,
    QuotaExceededError,
    ServerConfigurationError,
    ValidationError,
)
from novel_chat.config import settings
from novel_chat.infrastructure.bus.redis_pubsub import RedisPubSubSubscriber
from novel_chat.services.direct_message_service import MESSAGE_CREATED

logger = logging.getLogger(__name__)


async def _on_pubsub_event(event_type: str, data: dict[str, Any]) -> None:
    """Push a new direct message to both participants' local WS connections."""
    if event_type != MESSAGE_CREATED:
        return

    manager = ws.get_manager()
    for key in ("sender_id", "receiver_id"):
        user_id = data.get(key)
        if user_id is not None:
            await manager.send_to_principal(f"user:{user_id}", event_type, data)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    if settings.PRIVILEGED_USER_ID is None:
        logger.error("PRIVILEGED_USER_ID is not set; users will not be able to send messages")

    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    subscriber = RedisPubSubSubscriber(
        app.state.redis,
        settings.REDIS_PUBSUB_CHANNEL,
        _on_pubsub_event,
    )
    await subscriber.start()
    app.state.pubsub_subscriber = subscriber

    yield

    await subscriber.stop()
    await app.state.redis.aclose()
    logger.info("Redis connection pool closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Novel Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(chats.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(AuthorizationError)
    async def _forbidden(_req: Request, exc: AuthorizationError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def _bad_request(_req: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": _jsonable_errors(exc)})

    @app.exception_handler(QuotaExceededError)
    async def _quota(_req: Request, exc: QuotaExceededError) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={"detail": exc.detail, "limit": exc.limit, "remaining": exc.remaining},
        )

    @app.exception_handler(ServerConfigurationError)
    async def _misconfigured(_req: Request, exc: ServerConfigurationError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": exc.detail})


def _jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
