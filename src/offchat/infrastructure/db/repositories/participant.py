from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from offchat.domain.entities.participant import ChatParticipant
from offchat.infrastructure.db.mappers import chat as mapper
from offchat.infrastructure.db.models.chat import ChatParticipantModel


class ParticipantReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_participants(self, chat_id: str) -> list[ChatParticipant]:
        stmt = (
            select(ChatParticipantModel)
            .where(ChatParticipantModel.chat_id == chat_id)
            .order_by(ChatParticipantModel.joined_at.asc(), ChatParticipantModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.participant_to_entity(m) for m in result.scalars().all()]

    async def get_participant(self, chat_id: str, user_id: str) -> ChatParticipant | None:
        stmt = select(ChatParticipantModel).where(
            ChatParticipantModel.chat_id == chat_id,
            ChatParticipantModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.participant_to_entity(model) if model else None


class ParticipantWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, participant: ChatParticipant) -> None:
        self._session.add(mapper.participant_to_model(participant))
        await self._session.flush()

    async def remove(self, chat_id: str, user_id: str) -> bool:
        stmt = delete(ChatParticipantModel).where(
            ChatParticipantModel.chat_id == chat_id,
            ChatParticipantModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)
