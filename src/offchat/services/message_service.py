from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from offchat.application.dto.message import NewMessage
from offchat.application.exceptions import ForbiddenError
from offchat.application.uow import UnitOfWork, UoWFactory
from offchat.domain.entities.message import Message
from offchat.infrastructure.ws.protocol import MessagePayload, NewMessageFrame, TypingNotice
from offchat.services.broadcast_service import ChatBroadcaster

logger = logging.getLogger(__name__)

NFT_NOT_FOUND = "NFT not found"
NFT_NOT_OWNED = "You do not own this NFT"
NFT_LOOKUP_FAILED = "Failed to validate NFT"


class IngestOutcome(StrEnum):
    DELIVERED = "delivered"
    BLOCKED = "blocked"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class IngestResult:
    outcome: IngestOutcome
    message: Message | None = None
    error: str | None = None


class MessageIngestPipeline:
    """block check -> NFT validation -> persist -> broadcast."""

    def __init__(self, uow_factory: UoWFactory, broadcaster: ChatBroadcaster) -> None:
        self._uow_factory = uow_factory
        self._broadcaster = broadcaster

    async def ingest(self, new: NewMessage) -> IngestResult:
        try:
            async with self._uow_factory() as uow:
                # Block check and insert share one serializable transaction.
                await uow.begin_serializable()
                if await self._sender_blocked(new, uow):
                    logger.info(
                        "Message from %s to chat %s dropped: sender is blocked",
                        new.sender_id,
                        new.chat_id,
                    )
                    return IngestResult(IngestOutcome.BLOCKED)

                if new.nft_id:
                    error = await self._validate_nft(new, uow)
                    if error is not None:
                        return IngestResult(IngestOutcome.REJECTED, error=error)
                    new = new.as_nft()

                message = await uow.messages_w.create(new)
                await uow.commit()
        except Exception:
            logger.exception("Failed to persist message from %s to chat %s", new.sender_id, new.chat_id)
            return IngestResult(IngestOutcome.FAILED)

        try:
            await self._broadcaster.broadcast(
                message.chat_id,
                NewMessageFrame(message=MessagePayload.from_entity(message)),
            )
        except Exception:
            logger.exception("Broadcast of message %s failed", message.id)
        return IngestResult(IngestOutcome.DELIVERED, message=message)

    async def relay_typing(self, chat_id: str, user_id: str, is_typing: bool) -> int:
        return await self._broadcaster.broadcast(
            chat_id,
            TypingNotice(user_id=user_id, is_typing=is_typing),
            exclude_user_id=user_id,
        )

    @staticmethod
    async def _sender_blocked(new: NewMessage, uow: UnitOfWork) -> bool:
        participants = await uow.participants.list_participants(new.chat_id)
        for participant in participants:
            if participant.user_id == new.sender_id:
                continue
            if await uow.blocks.is_blocked(participant.user_id, new.sender_id):
                return True
        return False

    @staticmethod
    async def _validate_nft(new: NewMessage, uow: UnitOfWork) -> str | None:
        assert new.nft_id is not None
        try:
            nft = await uow.nfts.get_by_id(new.nft_id)
        except Exception:
            logger.exception("NFT lookup for %s failed", new.nft_id)
            return NFT_LOOKUP_FAILED
        if nft is None:
            logger.info("Message rejected: NFT %s not found", new.nft_id)
            return NFT_NOT_FOUND
        if nft.owner_id != new.sender_id:
            logger.info("Message rejected: %s does not own NFT %s", new.sender_id, new.nft_id)
            return NFT_NOT_OWNED
        return None


async def list_messages(
    chat_id: str,
    user_id: str,
    uow: UnitOfWork,
    *,
    limit: int = 100,
) -> list[Message]:
    if await uow.participants.get_participant(chat_id, user_id) is None:
        raise ForbiddenError("Not a participant of this chat")
    return await uow.messages.list_messages(chat_id, limit=limit)
