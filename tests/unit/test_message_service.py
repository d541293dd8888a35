from __future__ import annotations

import pytest

from offchat.application.dto.message import NewMessage
from offchat.application.exceptions import ForbiddenError
from offchat.domain.entities.moderation import BlockRelation
from offchat.domain.value_objects.enums import MessageType
from offchat.services import message_service
from offchat.services.broadcast_service import ChatBroadcaster
from offchat.services.message_service import IngestOutcome, MessageIngestPipeline
from tests.conftest import MEMBER, FakeUoW, connect, make_chat, make_message, make_nft


@pytest.fixture
def pipeline(uow: FakeUoW, broadcaster: ChatBroadcaster) -> MessageIngestPipeline:
    uow.add_chat(make_chat(), ("alice", MEMBER), ("bob", MEMBER))
    return MessageIngestPipeline(lambda: uow, broadcaster)


def _text(content: str = "hello", **kwargs) -> NewMessage:
    return NewMessage(chat_id="chat-1", sender_id="alice", content=content, **kwargs)


@pytest.mark.asyncio
async def test_ingest_persists_and_echoes_to_sender(pipeline, uow, registry):
    alice = connect(registry, "alice", "chat-1")
    bob = connect(registry, "bob", "chat-1")

    result = await pipeline.ingest(_text())

    assert result.outcome == IngestOutcome.DELIVERED
    assert result.message is not None
    assert uow._serializable and uow._committed
    assert len(uow.messages._messages) == 1
    for socket in (alice, bob):
        [frame] = socket.frames()
        assert frame["type"] == "new_message"
        assert frame["message"]["id"] == result.message.id
        assert frame["message"]["senderId"] == "alice"
        assert frame["message"]["messageType"] == "text"


@pytest.mark.asyncio
async def test_blocked_sender_is_silently_dropped(pipeline, uow, registry):
    uow.blocks._blocks.append(BlockRelation(blocker_id="bob", blocked_id="alice"))
    alice = connect(registry, "alice", "chat-1")
    bob = connect(registry, "bob", "chat-1")

    result = await pipeline.ingest(_text())

    assert result.outcome == IngestOutcome.BLOCKED
    assert uow.messages._messages == []
    assert not uow._committed
    assert alice.sent == [] and bob.sent == []


@pytest.mark.asyncio
async def test_block_by_sender_does_not_stop_own_messages(pipeline, uow):
    uow.blocks._blocks.append(BlockRelation(blocker_id="alice", blocked_id="bob"))

    result = await pipeline.ingest(_text())

    assert result.outcome == IngestOutcome.DELIVERED


@pytest.mark.asyncio
async def test_nft_message_is_forced_to_nft_type(pipeline, uow):
    uow.nfts._store["nft-1"] = make_nft("nft-1", owner_id="alice")

    result = await pipeline.ingest(_text(nft_id="nft-1", message_type=MessageType.TEXT))

    assert result.outcome == IngestOutcome.DELIVERED
    assert result.message.message_type == MessageType.NFT
    assert result.message.nft_id == "nft-1"


def _nft_missing(uow: FakeUoW) -> None:
    pass


def _nft_owned_by_bob(uow: FakeUoW) -> None:
    uow.nfts._store["nft-1"] = make_nft("nft-1", owner_id="bob")


def _nft_lookup_broken(uow: FakeUoW) -> None:
    uow.nfts.fail = True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("setup", "error"),
    [
        (_nft_missing, message_service.NFT_NOT_FOUND),
        (_nft_owned_by_bob, message_service.NFT_NOT_OWNED),
        (_nft_lookup_broken, message_service.NFT_LOOKUP_FAILED),
    ],
)
async def test_nft_validation_rejects(pipeline, uow, registry, setup, error):
    setup(uow)
    bob = connect(registry, "bob", "chat-1")

    result = await pipeline.ingest(_text(nft_id="nft-1"))

    assert result.outcome == IngestOutcome.REJECTED
    assert result.error == error
    assert uow.messages._messages == []
    assert bob.sent == []


@pytest.mark.asyncio
async def test_persist_failure_reports_failed(pipeline, uow, registry):
    uow.messages_w.fail = True
    bob = connect(registry, "bob", "chat-1")

    result = await pipeline.ingest(_text())

    assert result.outcome == IngestOutcome.FAILED
    assert uow._rolled_back
    assert bob.sent == []


@pytest.mark.asyncio
async def test_broadcast_failure_still_delivers(uow, registry):
    uow.add_chat(make_chat(), ("alice", MEMBER))

    class _Exploding(ChatBroadcaster):
        async def broadcast(self, chat_id, payload, exclude_user_id=None):
            raise RuntimeError("fan-out failed")

    pipeline = MessageIngestPipeline(lambda: uow, _Exploding(registry, lambda: uow))

    result = await pipeline.ingest(_text())

    assert result.outcome == IngestOutcome.DELIVERED
    assert len(uow.messages._messages) == 1


@pytest.mark.asyncio
async def test_typing_excludes_typist(pipeline, registry):
    alice = connect(registry, "alice", "chat-1")
    bob = connect(registry, "bob", "chat-1")

    sent = await pipeline.relay_typing("chat-1", "alice", True)

    assert sent == 1
    assert alice.sent == []
    assert bob.frames() == [{"type": "typing", "userId": "alice", "isTyping": True}]


@pytest.mark.asyncio
async def test_list_messages_requires_participation(uow):
    uow.add_chat(make_chat(), ("alice", MEMBER))
    uow.messages._messages.append(make_message())

    assert len(await message_service.list_messages("chat-1", "alice", uow)) == 1
    with pytest.raises(ForbiddenError):
        await message_service.list_messages("chat-1", "mallory", uow)
