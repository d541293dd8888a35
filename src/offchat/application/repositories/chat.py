from __future__ import annotations

from typing import Protocol

from offchat.domain.entities.chat import Chat
from offchat.domain.entities.moderation import BannedMember


class ChatReader(Protocol):
    async def get_by_id(self, chat_id: str) -> Chat | None: ...


class ChatWriter(Protocol):
    async def delete(self, chat_id: str) -> bool: ...

    async def ban(
        self, chat_id: str, user_id: str, banned_by: str, reason: str | None
    ) -> BannedMember: ...
