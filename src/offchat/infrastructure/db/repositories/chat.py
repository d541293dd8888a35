from __future__ import annotations

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from offchat.domain.entities.chat import Chat
from offchat.domain.entities.moderation import BannedMember
from offchat.infrastructure.db.mappers import chat as mapper
from offchat.infrastructure.db.models.chat import BannedMemberModel, ChatModel


class ChatReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, chat_id: str) -> Chat | None:
        model = await self._session.get(ChatModel, chat_id)
        return mapper.model_to_entity(model) if model else None


class ChatWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def delete(self, chat_id: str) -> bool:
        # participants and messages go with it via ON DELETE CASCADE
        result = await self._session.execute(delete(ChatModel).where(ChatModel.id == chat_id))
        return bool(result.rowcount)

    async def ban(
        self, chat_id: str, user_id: str, banned_by: str, reason: str | None
    ) -> BannedMember:
        stmt = (
            pg_insert(BannedMemberModel)
            .values(chat_id=chat_id, user_id=user_id, banned_by=banned_by, reason=reason)
            .returning(BannedMemberModel)
        )
        result = await self._session.execute(stmt)
        return mapper.banned_to_entity(result.scalar_one())
