"""Seed development data: creates the schema, two users, a direct chat and a few messages."""
from __future__ import annotations

import asyncio
import logging

from offchat.application.dto.message import NewMessage
from offchat.domain.entities.participant import ChatParticipant
from offchat.domain.value_objects.enums import ParticipantRole
from offchat.infrastructure.db.base import Base
from offchat.infrastructure.db.models import ChatModel, UserModel
from offchat.infrastructure.db.session import AsyncSessionLocal, engine
from offchat.infrastructure.db.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)

        alice = UserModel(username="alice")
        bob = UserModel(username="bob")
        chat = ChatModel(is_group=False)
        session.add_all([alice, bob, chat])
        await session.flush()

        await uow.participants_w.add(ChatParticipant(chat.id, alice.id, ParticipantRole.OWNER))
        await uow.participants_w.add(ChatParticipant(chat.id, bob.id, ParticipantRole.MEMBER))

        messages_data = [
            (alice.id, "Hey Bob, welcome to Offchat."),
            (bob.id, "Thanks! Sending you some test ETH later."),
            (alice.id, "Sounds good."),
        ]
        for sender_id, content in messages_data:
            await uow.messages_w.create(NewMessage(chat_id=chat.id, sender_id=sender_id, content=content))

        await uow.commit()
        logger.info(
            "Seeded chat %s (alice=%s, bob=%s) with %d messages",
            chat.id,
            alice.id,
            bob.id,
            len(messages_data),
        )

    await engine.dispose()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
