from __future__ import annotations

from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from offchat.infrastructure.db.repositories.chat import ChatReaderRepo, ChatWriterRepo
from offchat.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from offchat.infrastructure.db.repositories.participant import (
    ParticipantReaderRepo,
    ParticipantWriterRepo,
)
from offchat.infrastructure.db.repositories.social import (
    BlockReaderRepo,
    BlockWriterRepo,
    FriendshipReaderRepo,
    FriendshipWriterRepo,
    NftReaderRepo,
)
from offchat.infrastructure.db.repositories.user import UserReaderRepo, UserWriterRepo


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.users = UserReaderRepo(session)
        self.users_w = UserWriterRepo(session)
        self.chats = ChatReaderRepo(session)
        self.chats_w = ChatWriterRepo(session)
        self.participants = ParticipantReaderRepo(session)
        self.participants_w = ParticipantWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.blocks = BlockReaderRepo(session)
        self.blocks_w = BlockWriterRepo(session)
        self.nfts = NftReaderRepo(session)
        self.friendships = FriendshipReaderRepo(session)
        self.friendships_w = FriendshipWriterRepo(session)

    async def begin_serializable(self) -> None:
        # Must run before the first statement of the transaction.
        await self._session.connection(
            execution_options={"isolation_level": "SERIALIZABLE"}
        )

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
