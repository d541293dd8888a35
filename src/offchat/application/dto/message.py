from __future__ import annotations

from dataclasses import dataclass, replace

from offchat.domain.value_objects.enums import MessageType


@dataclass(frozen=True, slots=True)
class NewMessage:
    """A message about to be persisted; the store assigns id and timestamp."""

    chat_id: str
    sender_id: str
    content: str
    message_type: str = MessageType.TEXT
    transaction_hash: str | None = None
    amount: str | None = None
    token_symbol: str | None = None
    nft_id: str | None = None

    def as_nft(self) -> NewMessage:
        return replace(self, message_type=MessageType.NFT)
