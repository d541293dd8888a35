from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class KickRequest(BaseModel):
    user_id: str


class BanRequest(BaseModel):
    user_id: str
    reason: str | None = Field(None, max_length=500)


class BannedMemberResponse(BaseModel):
    id: str
    chat_id: str
    user_id: str
    banned_by: str
    reason: str | None
    banned_at: datetime

    model_config = {"from_attributes": True}
