"""WebSocket frame models.

All frames are JSON objects with a ``type`` discriminator and camelCase keys.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from offchat.domain.entities.friendship import Friendship
from offchat.domain.entities.message import Message
from offchat.domain.entities.user import User
from offchat.domain.value_objects.enums import MessageType


class Frame(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


# Client -> Server


class JoinFrame(Frame):
    type: Literal["join"]
    user_id: str
    chat_id: str


class JoinGlobalFrame(Frame):
    type: Literal["join_global"]
    user_id: str


class SendMessageFrame(Frame):
    type: Literal["send_message"]
    chat_id: str
    sender_id: str
    content: str
    message_type: MessageType | None = None
    transaction_hash: str | None = None
    amount: str | None = None
    token_symbol: str | None = None
    nft_id: str | None = None


class TypingFrame(Frame):
    type: Literal["typing"]
    chat_id: str
    user_id: str
    is_typing: bool


InboundFrame = Annotated[
    JoinFrame | JoinGlobalFrame | SendMessageFrame | TypingFrame,
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter[InboundFrame] = TypeAdapter(InboundFrame)


def parse_inbound(raw: str) -> JoinFrame | JoinGlobalFrame | SendMessageFrame | TypingFrame:
    return inbound_adapter.validate_json(raw)


# Server -> Client


class MessagePayload(Frame):
    id: str
    chat_id: str
    sender_id: str
    content: str
    message_type: str
    transaction_hash: str | None = None
    amount: str | None = None
    token_symbol: str | None = None
    nft_id: str | None = None
    timestamp: datetime
    is_delivered: bool = False
    is_read: bool = False
    is_pinned: bool = False

    @classmethod
    def from_entity(cls, message: Message) -> MessagePayload:
        return cls(
            id=message.id,
            chat_id=message.chat_id,
            sender_id=message.sender_id,
            content=message.content,
            message_type=str(message.message_type),
            transaction_hash=message.transaction_hash,
            amount=message.amount,
            token_symbol=message.token_symbol,
            nft_id=message.nft_id,
            timestamp=message.timestamp,
            is_delivered=message.is_delivered,
            is_read=message.is_read,
            is_pinned=message.is_pinned,
        )


class NewMessageFrame(Frame):
    type: Literal["new_message"] = "new_message"
    message: MessagePayload


class UserStatusFrame(Frame):
    type: Literal["user_status"] = "user_status"
    user_id: str
    is_online: bool


class TypingNotice(Frame):
    type: Literal["typing"] = "typing"
    user_id: str
    is_typing: bool


class MessageDeletedFrame(Frame):
    type: Literal["message_deleted"] = "message_deleted"
    message_id: str
    chat_id: str


class ChatDeletedFrame(Frame):
    type: Literal["chat_deleted"] = "chat_deleted"
    chat_id: str


class UserKickedFrame(Frame):
    type: Literal["user_kicked"] = "user_kicked"
    user_id: str
    chat_id: str
    reason: str


class FriendshipPayload(Frame):
    id: str
    requester_id: str
    addressee_id: str
    status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, friendship: Friendship) -> FriendshipPayload:
        return cls(
            id=friendship.id,
            requester_id=friendship.requester_id,
            addressee_id=friendship.addressee_id,
            status=str(friendship.status),
            created_at=friendship.created_at,
            updated_at=friendship.updated_at,
        )


class RequesterProfile(Frame):
    id: str
    username: str
    avatar: str | None = None

    @classmethod
    def from_entity(cls, user: User) -> RequesterProfile:
        return cls(id=user.id, username=user.username, avatar=user.avatar)


class FriendRequestReceivedFrame(Frame):
    type: Literal["friend_request_received"] = "friend_request_received"
    friendship: FriendshipPayload
    requester: RequesterProfile


class FriendRequestAcceptedFrame(Frame):
    type: Literal["friend_request_accepted"] = "friend_request_accepted"
    friendship_id: str
    requester_id: str
    addressee_id: str


class FriendRequestRejectedFrame(Frame):
    type: Literal["friend_request_rejected"] = "friend_request_rejected"
    friendship_id: str
    requester_id: str
    addressee_id: str


class ErrorFrame(Frame):
    type: Literal["error"] = "error"
    message: str

