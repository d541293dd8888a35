from __future__ import annotations

from typing import Protocol

from offchat.domain.entities.friendship import Friendship


class FriendshipReader(Protocol):
    async def get_by_id(self, friendship_id: str) -> Friendship | None: ...

    async def find_between(self, user_a: str, user_b: str) -> Friendship | None:
        """Any friendship row between the two users, in either direction."""
        ...


class FriendshipWriter(Protocol):
    async def create(self, requester_id: str, addressee_id: str) -> Friendship: ...

    async def set_status(self, friendship_id: str, status: str) -> Friendship | None: ...
