from __future__ import annotations

from offchat.application.exceptions import ForbiddenError
from offchat.application.repositories.participant import ParticipantReader
from offchat.domain.entities.participant import ChatParticipant


async def assert_chat_moderator(
    chat_id: str,
    user_id: str,
    participants: ParticipantReader,
    *,
    action: str = "moderate this chat",
) -> ChatParticipant:
    """Raise unless the user is an admin or owner of the chat."""
    participant = await participants.get_participant(chat_id, user_id)
    if participant is None or not participant.is_moderator:
        raise ForbiddenError(f"You don't have permission to {action}")
    return participant
