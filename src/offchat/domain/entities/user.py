from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class User:
    id: str
    username: str
    wallet_address: str | None
    avatar: str | None
    is_online: bool
    last_seen: datetime | None
