from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    chat_id: str
    sender_id: str
    content: str
    message_type: str
    transaction_hash: str | None
    amount: str | None
    token_symbol: str | None
    nft_id: str | None
    timestamp: datetime
    is_delivered: bool = False
    is_read: bool = False
    is_pinned: bool = False
