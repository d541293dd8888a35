from __future__ import annotations

from typing import Protocol

from offchat.domain.entities.user import User


class UserReader(Protocol):
    async def get_by_id(self, user_id: str) -> User | None: ...


class UserWriter(Protocol):
    async def set_online_status(self, user_id: str, is_online: bool) -> None:
        """Flip the online flag and touch last_seen."""
        ...
