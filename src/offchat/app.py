from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from offchat.api.middleware.correlation_id import CorrelationIdMiddleware
from offchat.api.middleware.metrics import RequestTimingMiddleware
from offchat.api.v1.routers import blocks, chats, friends, health, messages, ws
from offchat.application.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from offchat.application.uow import UoWFactory
from offchat.config import settings
from offchat.infrastructure.ws.registry import InMemoryConnectionRegistry
from offchat.services.broadcast_service import ChatBroadcaster
from offchat.services.friend_service import FriendNotifier
from offchat.services.message_service import MessageIngestPipeline
from offchat.services.presence_service import PresenceTracker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    logger.info("Realtime core started (ws path %s)", settings.WS_PATH)

    yield

    logger.info("Shutting down with %d open connection(s)", len(app.state.registry))
    if app.state.owns_engine:
        from offchat.infrastructure.db.session import engine

        await engine.dispose()
        logger.info("Database engine disposed")


def create_app(uow_factory: UoWFactory | None = None) -> FastAPI:
    app = FastAPI(
        title="Offchat Realtime Core",
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

    _wire_realtime(app, uow_factory)
    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(chats.router)
    app.include_router(friends.router)
    app.include_router(blocks.router)
    app.include_router(ws.router)

    return app


def _wire_realtime(app: FastAPI, uow_factory: UoWFactory | None) -> None:
    """One registry per app; every socket-facing service shares it."""
    app.state.owns_engine = uow_factory is None
    if uow_factory is None:
        from offchat.infrastructure.db.session import sqlalchemy_uow

        uow_factory = sqlalchemy_uow

    registry = InMemoryConnectionRegistry()
    broadcaster = ChatBroadcaster(registry, uow_factory)

    app.state.uow_factory = uow_factory
    app.state.registry = registry
    app.state.broadcaster = broadcaster
    app.state.presence = PresenceTracker(registry, broadcaster, uow_factory)
    app.state.pipeline = MessageIngestPipeline(uow_factory, broadcaster)
    app.state.friend_notifier = FriendNotifier(broadcaster)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})
