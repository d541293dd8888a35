"""Fan-out of socket frames to the live connections of a chat."""
from __future__ import annotations

import logging

from offchat.application.ports.connections import ConnectionRegistry
from offchat.application.uow import UoWFactory
from offchat.infrastructure.ws.protocol import Frame

logger = logging.getLogger(__name__)


class ChatBroadcaster:
    def __init__(self, registry: ConnectionRegistry, uow_factory: UoWFactory) -> None:
        self._registry = registry
        self._uow_factory = uow_factory

    async def broadcast(
        self,
        chat_id: str,
        payload: Frame,
        exclude_user_id: str | None = None,
    ) -> int:
        """Send ``payload`` to every connected participant of the chat.

        Participants are resolved from the store on every call and served in
        list order. A failing send evicts that connection and the fan-out
        carries on. Returns the number of sockets reached.
        """
        async with self._uow_factory() as uow:
            participants = await uow.participants.list_participants(chat_id)

        raw = payload.to_json()
        sent = 0
        for participant in participants:
            user_id = participant.user_id
            if user_id == exclude_user_id:
                continue
            if await self._deliver(user_id, raw):
                sent += 1
        logger.debug("Broadcast to chat %s reached %d socket(s)", chat_id, sent)
        return sent

    async def send_to_user(self, user_id: str, payload: Frame) -> bool:
        return await self._deliver(user_id, payload.to_json())

    async def _deliver(self, user_id: str, raw: str) -> bool:
        connection = self._registry.get(user_id)
        if connection is None or not connection.socket.is_open:
            return False
        try:
            await connection.socket.send_text(raw)
        except Exception:
            logger.warning("Send to %s failed; evicting connection", user_id, exc_info=True)
            # Only evict if nobody re-registered in the meantime.
            if self._registry.get(user_id) is connection:
                self._registry.delete(user_id)
            return False
        return True
