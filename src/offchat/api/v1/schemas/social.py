from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class FriendRequestCreate(BaseModel):
    addressee_id: str


class FriendshipResponse(BaseModel):
    id: str
    requester_id: str
    addressee_id: str
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BlockRequest(BaseModel):
    user_id: str


class BlockResponse(BaseModel):
    blocker_id: str
    blocked_id: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
