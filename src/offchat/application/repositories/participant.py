from __future__ import annotations

from typing import Protocol

from offchat.domain.entities.participant import ChatParticipant


class ParticipantReader(Protocol):
    async def list_participants(self, chat_id: str) -> list[ChatParticipant]: ...

    async def get_participant(
        self, chat_id: str, user_id: str
    ) -> ChatParticipant | None: ...


class ParticipantWriter(Protocol):
    async def add(self, participant: ChatParticipant) -> None: ...

    async def remove(self, chat_id: str, user_id: str) -> bool: ...
