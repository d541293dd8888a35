from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from offchat.application.dto.message import NewMessage
from offchat.domain.entities.message import Message
from offchat.infrastructure.db.mappers import message as mapper
from offchat.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: str) -> Message | None:
        model = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(model) if model else None

    async def list_messages(self, chat_id: str, *, limit: int = 100) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.chat_id == chat_id)
            .order_by(MessageModel.timestamp.asc(), MessageModel.id.asc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: NewMessage) -> Message:
        values = {
            "chat_id": message.chat_id,
            "sender_id": message.sender_id,
            "content": message.content,
            "message_type": str(message.message_type),
            "transaction_hash": message.transaction_hash,
            "amount": message.amount,
            "token_symbol": message.token_symbol,
            "nft_id": message.nft_id,
        }
        # RETURNING brings back the server-assigned id and timestamp.
        stmt = pg_insert(MessageModel).values(**values).returning(MessageModel)
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def delete(self, message_id: str) -> bool:
        stmt = delete(MessageModel).where(MessageModel.id == message_id)
        result = await self._session.execute(stmt)
        return bool(result.rowcount)
