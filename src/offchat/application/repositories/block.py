from __future__ import annotations

from typing import Protocol

from offchat.domain.entities.moderation import BlockRelation


class BlockReader(Protocol):
    async def is_blocked(self, blocker_id: str, blocked_id: str) -> bool: ...

    async def list_blocked(self, blocker_id: str) -> list[BlockRelation]: ...


class BlockWriter(Protocol):
    async def block(self, blocker_id: str, blocked_id: str) -> BlockRelation: ...

    async def unblock(self, blocker_id: str, blocked_id: str) -> bool: ...
