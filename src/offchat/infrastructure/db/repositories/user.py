from __future__ import annotations

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession

from offchat.domain.entities.user import User
from offchat.infrastructure.db.mappers import user as mapper
from offchat.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str) -> User | None:
        model = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(model) if model else None


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def set_online_status(self, user_id: str, is_online: bool) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(is_online=is_online, last_seen=func.now())
        )
        await self._session.execute(stmt)
