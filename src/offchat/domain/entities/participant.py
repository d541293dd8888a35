from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from offchat.domain.value_objects.enums import ParticipantRole


@dataclass(frozen=True, slots=True)
class ChatParticipant:
    chat_id: str
    user_id: str
    role: str = ParticipantRole.MEMBER
    joined_at: datetime | None = None

    @property
    def is_moderator(self) -> bool:
        return self.role in (ParticipantRole.ADMIN, ParticipantRole.OWNER)
