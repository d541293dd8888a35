"""In-process WebSocket connection registry."""
from __future__ import annotations

import logging
from collections.abc import Iterator

from offchat.application.ports.connections import ChatSocket, Connection

logger = logging.getLogger(__name__)


class InMemoryConnectionRegistry:
    """Maps a user id to its single live connection.

    Last writer wins: a second ``register`` for the same user replaces the
    first connection, which is no longer reachable through the registry.
    """

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    def get(self, user_id: str) -> Connection | None:
        return self._connections.get(user_id)

    def set(self, user_id: str, connection: Connection) -> None:
        self._connections[user_id] = connection

    def delete(self, user_id: str) -> None:
        self._connections.pop(user_id, None)

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._connections.values()))

    def __len__(self) -> int:
        return len(self._connections)

    def register(
        self,
        user_id: str,
        socket: ChatSocket,
        chat_id: str | None = None,
        is_global: bool = False,
    ) -> Connection:
        previous = self._connections.get(user_id)
        if previous is not None and previous.socket is not socket:
            logger.info("Replacing connection for user %s", user_id)
        connection = Connection(user_id=user_id, socket=socket, chat_id=chat_id, is_global=is_global)
        self._connections[user_id] = connection
        logger.debug("WS registered: %s (total=%d)", user_id, len(self._connections))
        return connection

    def unregister(self, user_id: str, socket: ChatSocket | None = None) -> Connection | None:
        """Remove the user's connection and return it.

        When ``socket`` is given and is not the registered one the mapping
        is left alone and ``None`` is returned.
        """
        current = self._connections.get(user_id)
        if current is None:
            return None
        if socket is not None and current.socket is not socket:
            logger.debug("Stale socket closed for %s; keeping newer connection", user_id)
            return None
        del self._connections[user_id]
        logger.debug("WS unregistered: %s (total=%d)", user_id, len(self._connections))
        return current
