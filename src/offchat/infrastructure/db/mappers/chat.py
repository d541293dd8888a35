from __future__ import annotations

from offchat.domain.entities.chat import Chat
from offchat.domain.entities.moderation import BannedMember
from offchat.domain.entities.participant import ChatParticipant
from offchat.infrastructure.db.models.chat import (
    BannedMemberModel,
    ChatModel,
    ChatParticipantModel,
)


def model_to_entity(model: ChatModel) -> Chat:
    return Chat(
        id=model.id,
        name=model.name,
        username=model.username,
        is_group=model.is_group,
        is_pinned=model.is_pinned,
        created_at=model.created_at,
    )


def participant_to_entity(model: ChatParticipantModel) -> ChatParticipant:
    return ChatParticipant(
        chat_id=model.chat_id,
        user_id=model.user_id,
        role=model.role,
        joined_at=model.joined_at,
    )


def participant_to_model(entity: ChatParticipant) -> ChatParticipantModel:
    model = ChatParticipantModel(
        chat_id=entity.chat_id,
        user_id=entity.user_id,
        role=str(entity.role),
    )
    if entity.joined_at is not None:
        model.joined_at = entity.joined_at
    return model


def banned_to_entity(model: BannedMemberModel) -> BannedMember:
    return BannedMember(
        id=model.id,
        chat_id=model.chat_id,
        user_id=model.user_id,
        banned_by=model.banned_by,
        reason=model.reason,
        banned_at=model.banned_at,
    )
