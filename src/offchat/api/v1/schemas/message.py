from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class MessageResponse(BaseModel):
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
    is_delivered: bool
    is_read: bool
    is_pinned: bool

    model_config = {"from_attributes": True}
