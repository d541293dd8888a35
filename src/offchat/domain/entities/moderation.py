from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class BlockRelation:
    blocker_id: str
    blocked_id: str
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class BannedMember:
    id: str
    chat_id: str
    user_id: str
    banned_by: str
    reason: str | None
    banned_at: datetime
