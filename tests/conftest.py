"""Shared test fixtures."""
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import TracebackType
from typing import Any

import pytest

from offchat.application.dto.message import NewMessage
from offchat.application.dto.principal import Principal
from offchat.domain.entities.chat import Chat
from offchat.domain.entities.friendship import Friendship
from offchat.domain.entities.message import Message
from offchat.domain.entities.moderation import BannedMember, BlockRelation
from offchat.domain.entities.nft import Nft
from offchat.domain.entities.participant import ChatParticipant
from offchat.domain.entities.user import User
from offchat.domain.value_objects.enums import FriendshipStatus, ParticipantRole
from offchat.infrastructure.ws.registry import InMemoryConnectionRegistry
from offchat.services.broadcast_service import ChatBroadcaster


def _now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def user_principal() -> Principal:
    return Principal(user_id="alice")


def make_user(user_id: str = "alice", *, username: str | None = None, avatar: str | None = None) -> User:
    return User(
        id=user_id,
        username=username or user_id,
        wallet_address=None,
        avatar=avatar,
        is_online=False,
        last_seen=None,
    )


def make_chat(chat_id: str = "chat-1", *, is_group: bool = True) -> Chat:
    return Chat(
        id=chat_id,
        name="Test chat" if is_group else None,
        username=None,
        is_group=is_group,
        is_pinned=False,
        created_at=_now(),
    )


def make_message(
    *,
    chat_id: str = "chat-1",
    sender_id: str = "alice",
    content: str = "hello",
    message_id: str | None = None,
) -> Message:
    return Message(
        id=message_id or str(uuid.uuid4()),
        chat_id=chat_id,
        sender_id=sender_id,
        content=content,
        message_type="text",
        transaction_hash=None,
        amount=None,
        token_symbol=None,
        nft_id=None,
        timestamp=_now(),
    )


def make_nft(nft_id: str = "nft-1", *, owner_id: str = "alice") -> Nft:
    return Nft(
        id=nft_id,
        owner_id=owner_id,
        contract_address="0x" + "ab" * 20,
        token_id="7",
        name="Matrix Cat #7",
        chain="bsc",
    )


def make_friendship(
    friendship_id: str = "fr-1",
    *,
    requester_id: str = "alice",
    addressee_id: str = "bob",
    status: str = FriendshipStatus.PENDING,
) -> Friendship:
    now = _now()
    return Friendship(
        id=friendship_id,
        requester_id=requester_id,
        addressee_id=addressee_id,
        status=status,
        created_at=now,
        updated_at=now,
    )


# -- sockets -----------------------------------------------------------------


@dataclass(eq=False)
class FakeSocket:
    open: bool = True
    fail: bool = False
    sent: list[str] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.open

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket is gone")
        self.sent.append(data)

    def frames(self) -> list[dict[str, Any]]:
        return [json.loads(s) for s in self.sent]

    def types(self) -> list[str]:
        return [f["type"] for f in self.frames()]


# -- repositories ------------------------------------------------------------


@dataclass
class FakeUserReader:
    _store: dict[str, User] = field(default_factory=dict)

    async def get_by_id(self, user_id: str) -> User | None:
        return self._store.get(user_id)


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader
    _status_changes: list[tuple[str, bool]] = field(default_factory=list)

    async def set_online_status(self, user_id: str, is_online: bool) -> None:
        self._status_changes.append((user_id, is_online))
        user = self._reader._store.get(user_id)
        if user is not None:
            self._reader._store[user_id] = replace(user, is_online=is_online, last_seen=_now())


@dataclass
class FakeChatReader:
    _store: dict[str, Chat] = field(default_factory=dict)

    async def get_by_id(self, chat_id: str) -> Chat | None:
        return self._store.get(chat_id)


@dataclass
class FakeParticipantReader:
    _participants: list[ChatParticipant] = field(default_factory=list)
    fail: bool = False

    async def list_participants(self, chat_id: str) -> list[ChatParticipant]:
        if self.fail:
            raise RuntimeError("database unavailable")
        return [p for p in self._participants if p.chat_id == chat_id]

    async def get_participant(self, chat_id: str, user_id: str) -> ChatParticipant | None:
        for p in self._participants:
            if p.chat_id == chat_id and p.user_id == user_id:
                return p
        return None


@dataclass
class FakeParticipantWriter:
    _reader: FakeParticipantReader

    async def add(self, participant: ChatParticipant) -> None:
        self._reader._participants.append(participant)

    async def remove(self, chat_id: str, user_id: str) -> bool:
        before = len(self._reader._participants)
        self._reader._participants = [
            p for p in self._reader._participants if not (p.chat_id == chat_id and p.user_id == user_id)
        ]
        return len(self._reader._participants) < before


@dataclass
class FakeChatWriter:
    _reader: FakeChatReader
    _participants: FakeParticipantReader
    _banned: list[BannedMember] = field(default_factory=list)

    async def delete(self, chat_id: str) -> bool:
        if self._reader._store.pop(chat_id, None) is None:
            return False
        self._participants._participants = [
            p for p in self._participants._participants if p.chat_id != chat_id
        ]
        return True

    async def ban(self, chat_id: str, user_id: str, banned_by: str, reason: str | None) -> BannedMember:
        banned = BannedMember(
            id=str(uuid.uuid4()),
            chat_id=chat_id,
            user_id=user_id,
            banned_by=banned_by,
            reason=reason,
            banned_at=_now(),
        )
        self._banned.append(banned)
        return banned


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def get_by_id(self, message_id: str) -> Message | None:
        return next((m for m in self._messages if m.id == message_id), None)

    async def list_messages(self, chat_id: str, *, limit: int = 100) -> list[Message]:
        return [m for m in self._messages if m.chat_id == chat_id][:limit]


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    fail: bool = False

    async def create(self, message: NewMessage) -> Message:
        if self.fail:
            raise RuntimeError("insert failed")
        created = Message(
            id=str(uuid.uuid4()),
            chat_id=message.chat_id,
            sender_id=message.sender_id,
            content=message.content,
            message_type=str(message.message_type),
            transaction_hash=message.transaction_hash,
            amount=message.amount,
            token_symbol=message.token_symbol,
            nft_id=message.nft_id,
            timestamp=_now(),
        )
        self._reader._messages.append(created)
        return created

    async def delete(self, message_id: str) -> bool:
        before = len(self._reader._messages)
        self._reader._messages = [m for m in self._reader._messages if m.id != message_id]
        return len(self._reader._messages) < before


@dataclass
class FakeBlockReader:
    _blocks: list[BlockRelation] = field(default_factory=list)

    async def is_blocked(self, blocker_id: str, blocked_id: str) -> bool:
        return any(b.blocker_id == blocker_id and b.blocked_id == blocked_id for b in self._blocks)

    async def list_blocked(self, blocker_id: str) -> list[BlockRelation]:
        return [b for b in self._blocks if b.blocker_id == blocker_id]


@dataclass
class FakeBlockWriter:
    _reader: FakeBlockReader

    async def block(self, blocker_id: str, blocked_id: str) -> BlockRelation:
        for b in self._reader._blocks:
            if b.blocker_id == blocker_id and b.blocked_id == blocked_id:
                return b
        relation = BlockRelation(blocker_id=blocker_id, blocked_id=blocked_id, created_at=_now())
        self._reader._blocks.append(relation)
        return relation

    async def unblock(self, blocker_id: str, blocked_id: str) -> bool:
        before = len(self._reader._blocks)
        self._reader._blocks = [
            b for b in self._reader._blocks if not (b.blocker_id == blocker_id and b.blocked_id == blocked_id)
        ]
        return len(self._reader._blocks) < before


@dataclass
class FakeNftReader:
    _store: dict[str, Nft] = field(default_factory=dict)
    fail: bool = False

    async def get_by_id(self, nft_id: str) -> Nft | None:
        if self.fail:
            raise RuntimeError("nft lookup failed")
        return self._store.get(nft_id)


@dataclass
class FakeFriendshipReader:
    _store: dict[str, Friendship] = field(default_factory=dict)

    async def get_by_id(self, friendship_id: str) -> Friendship | None:
        return self._store.get(friendship_id)

    async def find_between(self, user_a: str, user_b: str) -> Friendship | None:
        for f in self._store.values():
            if {f.requester_id, f.addressee_id} == {user_a, user_b}:
                return f
        return None


@dataclass
class FakeFriendshipWriter:
    _reader: FakeFriendshipReader

    async def create(self, requester_id: str, addressee_id: str) -> Friendship:
        friendship = make_friendship(
            str(uuid.uuid4()), requester_id=requester_id, addressee_id=addressee_id
        )
        self._reader._store[friendship.id] = friendship
        return friendship

    async def set_status(self, friendship_id: str, status: str) -> Friendship | None:
        friendship = self._reader._store.get(friendship_id)
        if friendship is None:
            return None
        updated = replace(friendship, status=str(status), updated_at=_now())
        self._reader._store[friendship_id] = updated
        return updated


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests; also usable as its own context manager."""

    users: FakeUserReader = field(default_factory=FakeUserReader)
    users_w: FakeUserWriter | None = None
    chats: FakeChatReader = field(default_factory=FakeChatReader)
    chats_w: FakeChatWriter | None = None
    participants: FakeParticipantReader = field(default_factory=FakeParticipantReader)
    participants_w: FakeParticipantWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    blocks: FakeBlockReader = field(default_factory=FakeBlockReader)
    blocks_w: FakeBlockWriter | None = None
    nfts: FakeNftReader = field(default_factory=FakeNftReader)
    friendships: FakeFriendshipReader = field(default_factory=FakeFriendshipReader)
    friendships_w: FakeFriendshipWriter | None = None
    _committed: bool = False
    _rolled_back: bool = False
    _serializable: bool = False

    def __post_init__(self) -> None:
        if self.users_w is None:
            self.users_w = FakeUserWriter(self.users)
        if self.chats_w is None:
            self.chats_w = FakeChatWriter(self.chats, self.participants)
        if self.participants_w is None:
            self.participants_w = FakeParticipantWriter(self.participants)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        if self.blocks_w is None:
            self.blocks_w = FakeBlockWriter(self.blocks)
        if self.friendships_w is None:
            self.friendships_w = FakeFriendshipWriter(self.friendships)

    def add_user(self, user: User) -> User:
        self.users._store[user.id] = user
        return user

    def add_chat(self, chat: Chat, *members: tuple[str, str]) -> Chat:
        self.chats._store[chat.id] = chat
        for user_id, role in members:
            self.participants._participants.append(
                ChatParticipant(chat_id=chat.id, user_id=user_id, role=role)
            )
        return chat

    async def begin_serializable(self) -> None:
        self._serializable = True

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        self._rolled_back = True

    async def __aenter__(self) -> FakeUoW:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()


MEMBER = ParticipantRole.MEMBER.value
ADMIN = ParticipantRole.ADMIN.value
OWNER = ParticipantRole.OWNER.value


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()


@pytest.fixture
def registry() -> InMemoryConnectionRegistry:
    return InMemoryConnectionRegistry()


@pytest.fixture
def broadcaster(registry: InMemoryConnectionRegistry, uow: FakeUoW) -> ChatBroadcaster:
    return ChatBroadcaster(registry, lambda: uow)


def connect(registry: InMemoryConnectionRegistry, user_id: str, chat_id: str | None = None) -> FakeSocket:
    socket = FakeSocket()
    registry.register(user_id, socket, chat_id=chat_id)
    return socket
