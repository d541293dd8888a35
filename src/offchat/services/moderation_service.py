"""Deletion, kick/ban and block operations that emit socket events."""
from __future__ import annotations

import logging

from offchat.application.dto.principal import Principal
from offchat.application.exceptions import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from offchat.application.policies.permissions import assert_chat_moderator
from offchat.application.uow import UnitOfWork
from offchat.domain.entities.moderation import BannedMember, BlockRelation
from offchat.domain.value_objects.enums import ParticipantRole
from offchat.infrastructure.ws.protocol import (
    ChatDeletedFrame,
    MessageDeletedFrame,
    UserKickedFrame,
)
from offchat.services.broadcast_service import ChatBroadcaster

logger = logging.getLogger(__name__)

KICK_REASON = "You have been removed from this group"
BAN_REASON = "You have been banned from this group"


async def delete_message(
    message_id: str,
    principal: Principal,
    delete_for_everyone: bool,
    uow: UnitOfWork,
    broadcaster: ChatBroadcaster,
) -> None:
    message = await uow.messages.get_by_id(message_id)
    if message is None:
        raise NotFoundError("Message not found")

    chat = await uow.chats.get_by_id(message.chat_id)
    is_direct = chat is not None and not chat.is_group
    if message.sender_id != principal.user_id and not is_direct:
        await assert_chat_moderator(
            message.chat_id,
            principal.user_id,
            uow.participants,
            action="delete this message",
        )

    if not await uow.messages_w.delete(message_id):
        raise NotFoundError("Message not found")
    await uow.commit()

    if delete_for_everyone:
        await broadcaster.broadcast(
            message.chat_id,
            MessageDeletedFrame(message_id=message_id, chat_id=message.chat_id),
        )


async def delete_chat(
    chat_id: str,
    principal: Principal,
    delete_for_everyone: bool,
    uow: UnitOfWork,
    broadcaster: ChatBroadcaster,
) -> None:
    if await uow.chats.get_by_id(chat_id) is None:
        raise NotFoundError("Chat not found")
    if await uow.participants.get_participant(chat_id, principal.user_id) is None:
        raise ForbiddenError("You don't have permission to delete this chat")

    # Participants are gone once the chat row is deleted, so notify first.
    if delete_for_everyone:
        await broadcaster.broadcast(chat_id, ChatDeletedFrame(chat_id=chat_id))

    if not await uow.chats_w.delete(chat_id):
        raise NotFoundError("Chat deletion failed")
    await uow.commit()
    logger.info("Chat %s deleted by %s", chat_id, principal.user_id)


async def _removable_target(chat_id: str, user_id: str, action: str, uow: UnitOfWork) -> None:
    target = await uow.participants.get_participant(chat_id, user_id)
    if target is None:
        raise NotFoundError("User is not a member of this chat")
    if target.role == ParticipantRole.OWNER:
        raise ForbiddenError(f"Cannot {action} the chat owner")


async def _announce_removal(
    chat_id: str,
    user_id: str,
    reason: str,
    broadcaster: ChatBroadcaster,
) -> None:
    frame = UserKickedFrame(user_id=user_id, chat_id=chat_id, reason=reason)
    await broadcaster.broadcast(chat_id, frame)
    await broadcaster.send_to_user(user_id, frame)


async def kick_user(
    chat_id: str,
    user_id: str,
    principal: Principal,
    uow: UnitOfWork,
    broadcaster: ChatBroadcaster,
) -> None:
    await assert_chat_moderator(chat_id, principal.user_id, uow.participants, action="remove users")
    await _removable_target(chat_id, user_id, "remove", uow)

    await uow.participants_w.remove(chat_id, user_id)
    await uow.commit()
    logger.info("User %s removed from chat %s by %s", user_id, chat_id, principal.user_id)

    await _announce_removal(chat_id, user_id, KICK_REASON, broadcaster)


async def ban_user(
    chat_id: str,
    user_id: str,
    principal: Principal,
    reason: str | None,
    uow: UnitOfWork,
    broadcaster: ChatBroadcaster,
) -> BannedMember:
    await assert_chat_moderator(chat_id, principal.user_id, uow.participants, action="ban users")
    await _removable_target(chat_id, user_id, "ban", uow)

    banned = await uow.chats_w.ban(chat_id, user_id, principal.user_id, reason)
    await uow.participants_w.remove(chat_id, user_id)
    await uow.commit()
    logger.info("User %s banned from chat %s by %s", user_id, chat_id, principal.user_id)

    await _announce_removal(chat_id, user_id, reason or BAN_REASON, broadcaster)
    return banned


async def block_user(principal: Principal, blocked_id: str, uow: UnitOfWork) -> BlockRelation:
    if principal.user_id == blocked_id:
        raise ValidationError("You cannot block yourself")
    if await uow.users.get_by_id(blocked_id) is None:
        raise NotFoundError("User not found")
    relation = await uow.blocks_w.block(principal.user_id, blocked_id)
    await uow.commit()
    return relation


async def unblock_user(principal: Principal, blocked_id: str, uow: UnitOfWork) -> None:
    if not await uow.blocks_w.unblock(principal.user_id, blocked_id):
        raise NotFoundError("User is not blocked")
    await uow.commit()


async def list_blocked(principal: Principal, uow: UnitOfWork) -> list[BlockRelation]:
    return await uow.blocks.list_blocked(principal.user_id)
