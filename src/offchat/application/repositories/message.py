from __future__ import annotations

from typing import Protocol

from offchat.application.dto.message import NewMessage
from offchat.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: str) -> Message | None: ...

    async def list_messages(self, chat_id: str, *, limit: int = 100) -> list[Message]: ...


class MessageWriter(Protocol):
    async def create(self, message: NewMessage) -> Message:
        """Insert the message; the store assigns id and timestamp."""
        ...

    async def delete(self, message_id: str) -> bool: ...
