from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Chat:
    id: str
    name: str | None
    username: str | None
    is_group: bool
    is_pinned: bool
    created_at: datetime
