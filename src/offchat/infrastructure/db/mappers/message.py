from __future__ import annotations

from offchat.domain.entities.message import Message
from offchat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        chat_id=model.chat_id,
        sender_id=model.sender_id,
        content=model.content,
        message_type=model.message_type,
        transaction_hash=model.transaction_hash,
        amount=model.amount,
        token_symbol=model.token_symbol,
        nft_id=model.nft_id,
        timestamp=model.timestamp,
        is_delivered=model.is_delivered,
        is_read=model.is_read,
        is_pinned=model.is_pinned,
    )

