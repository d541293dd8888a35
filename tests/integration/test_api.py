"""REST API smoke tests against an in-memory UoW."""
from __future__ import annotations

import jwt
import pytest
from fastapi.testclient import TestClient

from offchat.app import create_app
from offchat.config import settings
from offchat.domain.entities.participant import ChatParticipant
from tests.conftest import (
    ADMIN,
    MEMBER,
    OWNER,
    FakeSocket,
    FakeUoW,
    make_chat,
    make_friendship,
    make_message,
    make_user,
)


def _make_token(sub: str = "alice") -> str:
    return jwt.encode({"sub": sub}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _auth(sub: str = "alice") -> dict[str, str]:
    return {"Authorization": f"Bearer {_make_token(sub)}"}


@pytest.fixture
def uow() -> FakeUoW:
    uow = FakeUoW()
    for user_id in ("alice", "bob", "olivia"):
        uow.add_user(make_user(user_id))
    uow.add_chat(make_chat("chat-1"), ("olivia", OWNER), ("alice", ADMIN), ("bob", MEMBER))
    return uow


@pytest.fixture
def app(uow: FakeUoW):
    return create_app(uow_factory=lambda: uow)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def test_healthz_reports_connections(client, app):
    app.state.registry.register("alice", FakeSocket())

    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "connections": 1}


def test_request_id_is_echoed(client):
    resp = client.get("/healthz", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"


def test_unauthenticated_is_rejected(client):
    assert client.get("/api/v1/chats/chat-1/messages").status_code in (401, 403)
    resp = client.get("/api/v1/chats/chat-1/messages", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


def test_list_messages(client, uow):
    uow.messages._messages.append(make_message(content="gm"))

    resp = client.get("/api/v1/chats/chat-1/messages", headers=_auth())

    assert resp.status_code == 200
    [body] = resp.json()
    assert body["content"] == "gm"
    assert body["message_type"] == "text"


def test_list_messages_for_outsider(client):
    resp = client.get("/api/v1/chats/chat-1/messages", headers=_auth("mallory"))
    assert resp.status_code == 403


def test_delete_message_broadcasts(client, uow, app):
    msg = make_message(sender_id="alice")
    uow.messages._messages.append(msg)
    bob = FakeSocket()
    app.state.registry.register("bob", bob, chat_id="chat-1")

    resp = client.delete(f"/api/v1/messages/{msg.id}?delete_for_everyone=true", headers=_auth())

    assert resp.status_code == 200
    assert resp.json() == {"detail": "Message deleted successfully"}
    assert bob.frames() == [{"type": "message_deleted", "messageId": msg.id, "chatId": "chat-1"}]


def test_delete_unknown_message(client):
    resp = client.delete("/api/v1/messages/nope", headers=_auth())
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Message not found"


def test_kick_and_ban(client, uow, app):
    bob = FakeSocket()
    app.state.registry.register("bob", bob, chat_id="chat-1")

    resp = client.post("/api/v1/chats/chat-1/kick", json={"user_id": "bob"}, headers=_auth())
    assert resp.status_code == 200
    assert bob.types() == ["user_kicked"]

    uow.participants._participants.append(ChatParticipant(chat_id="chat-1", user_id="bob", role=MEMBER))
    resp = client.post(
        "/api/v1/chats/chat-1/ban", json={"user_id": "bob", "reason": "spam"}, headers=_auth()
    )
    assert resp.status_code == 200
    assert resp.json()["reason"] == "spam"
    assert resp.json()["banned_by"] == "alice"


def test_member_cannot_kick(client):
    resp = client.post("/api/v1/chats/chat-1/kick", json={"user_id": "alice"}, headers=_auth("bob"))
    assert resp.status_code == 403


def test_owner_cannot_be_kicked(client):
    resp = client.post("/api/v1/chats/chat-1/kick", json={"user_id": "olivia"}, headers=_auth())
    assert resp.status_code == 403


def test_delete_chat(client, uow, app):
    bob = FakeSocket()
    app.state.registry.register("bob", bob, chat_id="chat-1")

    resp = client.delete("/api/v1/chats/chat-1?delete_for_everyone=true", headers=_auth("bob"))

    assert resp.status_code == 200
    assert "chat-1" not in uow.chats._store
    assert bob.types() == ["chat_deleted"]


def test_friend_request_flow(client, uow, app):
    bob = FakeSocket()
    alice = FakeSocket()
    app.state.registry.register("bob", bob, is_global=True)
    app.state.registry.register("alice", alice, is_global=True)

    resp = client.post("/api/v1/friends/requests", json={"addressee_id": "bob"}, headers=_auth())
    assert resp.status_code == 201
    friendship_id = resp.json()["id"]
    assert resp.json()["status"] == "pending"
    assert bob.types() == ["friend_request_received"]
    assert alice.sent == []

    resp = client.put(f"/api/v1/friends/{friendship_id}/accept", headers=_auth("bob"))
    assert resp.status_code == 200
    assert resp.json()["status"] == "accepted"
    assert alice.types() == ["friend_request_accepted"]


def test_friend_request_errors(client, uow):
    assert client.post(
        "/api/v1/friends/requests", json={"addressee_id": "alice"}, headers=_auth()
    ).status_code == 422
    assert client.post(
        "/api/v1/friends/requests", json={"addressee_id": "ghost"}, headers=_auth()
    ).status_code == 404

    existing = make_friendship("fr-9", requester_id="bob", addressee_id="alice")
    uow.friendships._store[existing.id] = existing
    assert client.post(
        "/api/v1/friends/requests", json={"addressee_id": "bob"}, headers=_auth()
    ).status_code == 409
    assert client.put("/api/v1/friends/fr-9/reject", headers=_auth("olivia")).status_code == 403


def test_blocks(client):
    resp = client.post("/api/v1/blocks", json={"user_id": "bob"}, headers=_auth())
    assert resp.status_code == 201
    assert resp.json()["blocked_id"] == "bob"

    assert [b["blocked_id"] for b in client.get("/api/v1/blocks", headers=_auth()).json()] == ["bob"]
    assert client.delete("/api/v1/blocks/bob", headers=_auth()).status_code == 204
    assert client.delete("/api/v1/blocks/bob", headers=_auth()).status_code == 404
    assert client.post("/api/v1/blocks", json={"user_id": "alice"}, headers=_auth()).status_code == 422
