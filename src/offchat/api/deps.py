"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from offchat.application.dto.principal import Principal
from offchat.application.ports.auth import TokenVerifier
from offchat.application.uow import UnitOfWork
from offchat.config import settings
from offchat.infrastructure.auth.hs256_verifier import HS256Verifier
from offchat.infrastructure.ws.registry import InMemoryConnectionRegistry
from offchat.services.broadcast_service import ChatBroadcaster
from offchat.services.friend_service import FriendNotifier

_bearer_scheme = HTTPBearer()


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    async with request.app.state.uow_factory() as uow:
        yield uow


UoWDep = Annotated[UnitOfWork, Depends(get_uow)]


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
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


def get_registry(request: Request) -> InMemoryConnectionRegistry:
    return request.app.state.registry


def get_broadcaster(request: Request) -> ChatBroadcaster:
    return request.app.state.broadcaster


def get_friend_notifier(request: Request) -> FriendNotifier:
    return request.app.state.friend_notifier


RegistryDep = Annotated[InMemoryConnectionRegistry, Depends(get_registry)]
BroadcasterDep = Annotated[ChatBroadcaster, Depends(get_broadcaster)]
FriendNotifierDep = Annotated[FriendNotifier, Depends(get_friend_notifier)]
