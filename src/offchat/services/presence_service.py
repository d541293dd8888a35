from __future__ import annotations

import logging

from offchat.application.ports.connections import ChatSocket, Connection
from offchat.application.uow import UoWFactory
from offchat.infrastructure.ws.protocol import UserStatusFrame
from offchat.infrastructure.ws.registry import InMemoryConnectionRegistry
from offchat.services.broadcast_service import ChatBroadcaster

logger = logging.getLogger(__name__)


class PresenceTracker:
    """Ties socket lifecycle to the persisted online flag."""

    def __init__(
        self,
        registry: InMemoryConnectionRegistry,
        broadcaster: ChatBroadcaster,
        uow_factory: UoWFactory,
    ) -> None:
        self._registry = registry
        self._broadcaster = broadcaster
        self._uow_factory = uow_factory

    async def mark_online(self, user_id: str) -> None:
        await self._set_status(user_id, True)

    async def mark_offline(self, user_id: str) -> None:
        await self._set_status(user_id, False)

    async def join(self, user_id: str, socket: ChatSocket, chat_id: str) -> Connection:
        connection = self._registry.register(user_id, socket, chat_id=chat_id)
        await self.mark_online(user_id)
        await self._broadcaster.broadcast(
            chat_id,
            UserStatusFrame(user_id=user_id, is_online=True),
            exclude_user_id=user_id,
        )
        return connection

    async def join_global(self, user_id: str, socket: ChatSocket) -> Connection:
        connection = self._registry.register(user_id, socket, is_global=True)
        await self.mark_online(user_id)
        return connection

    async def leave(
        self,
        user_id: str,
        socket: ChatSocket | None = None,
        chat_id: str | None = None,
    ) -> bool:
        """Handle a closed socket. Returns False for a socket already replaced.

        A connection already evicted by a failed send still goes offline;
        ``chat_id`` then names the chat to notify.
        """
        current = self._registry.get(user_id)
        if current is not None and socket is not None and current.socket is not socket:
            logger.debug("Stale socket closed for %s; keeping newer connection", user_id)
            return False
        connection = self._registry.unregister(user_id, socket)
        if connection is not None:
            chat_id = connection.chat_id
        await self.mark_offline(user_id)
        if chat_id:
            await self._broadcaster.broadcast(
                chat_id,
                UserStatusFrame(user_id=user_id, is_online=False),
                exclude_user_id=user_id,
            )
        return True

    async def _set_status(self, user_id: str, is_online: bool) -> None:
        async with self._uow_factory() as uow:
            await uow.users_w.set_online_status(user_id, is_online)
            await uow.commit()
        logger.debug("User %s is now %s", user_id, "online" if is_online else "offline")
