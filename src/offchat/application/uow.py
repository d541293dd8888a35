from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from offchat.application.repositories.block import BlockReader, BlockWriter
from offchat.application.repositories.chat import ChatReader, ChatWriter
from offchat.application.repositories.friendship import (
    FriendshipReader,
    FriendshipWriter,
)
from offchat.application.repositories.message import MessageReader, MessageWriter
from offchat.application.repositories.nft import NftReader
from offchat.application.repositories.participant import (
    ParticipantReader,
    ParticipantWriter,
)
from offchat.application.repositories.user import UserReader, UserWriter


class UnitOfWork(Protocol):
    users: UserReader
    users_w: UserWriter
    chats: ChatReader
    chats_w: ChatWriter
    participants: ParticipantReader
    participants_w: ParticipantWriter
    messages: MessageReader
    messages_w: MessageWriter
    blocks: BlockReader
    blocks_w: BlockWriter
    nfts: NftReader
    friendships: FriendshipReader
    friendships_w: FriendshipWriter

    async def begin_serializable(self) -> None:
        """Run the rest of this unit of work at SERIALIZABLE isolation."""
        ...

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...


UoWFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]
