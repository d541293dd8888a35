from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Friendship:
    id: str
    requester_id: str
    addressee_id: str
    status: str
    created_at: datetime
    updated_at: datetime

    def involves(self, user_id: str) -> bool:
        return user_id in (self.requester_id, self.addressee_id)
