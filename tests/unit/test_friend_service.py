from __future__ import annotations

import pytest

from offchat.application.dto.principal import Principal
from offchat.application.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from offchat.domain.value_objects.enums import FriendshipStatus
from offchat.services import friend_service
from offchat.services.broadcast_service import ChatBroadcaster
from offchat.services.friend_service import FriendNotifier
from tests.conftest import FakeUoW, connect, make_friendship, make_user


@pytest.fixture
def notifier(broadcaster: ChatBroadcaster) -> FriendNotifier:
    return FriendNotifier(broadcaster)


@pytest.fixture
def people(uow: FakeUoW) -> FakeUoW:
    uow.add_user(make_user("alice", avatar="https://img/alice.png"))
    uow.add_user(make_user("bob"))
    return uow


@pytest.mark.asyncio
async def test_request_is_pushed_to_addressee_only(people, notifier, registry, user_principal):
    alice = connect(registry, "alice")
    bob = connect(registry, "bob")
    carol = connect(registry, "carol")

    friendship = await friend_service.send_friend_request(user_principal, "bob", people, notifier)

    assert friendship.status == FriendshipStatus.PENDING
    assert people._committed
    [frame] = bob.frames()
    assert frame["type"] == "friend_request_received"
    assert frame["friendship"]["id"] == friendship.id
    assert frame["friendship"]["addresseeId"] == "bob"
    assert frame["requester"] == {
        "id": "alice",
        "username": "alice",
        "avatar": "https://img/alice.png",
    }
    assert alice.sent == [] and carol.sent == []


@pytest.mark.asyncio
async def test_request_to_offline_user_still_persists(people, notifier, user_principal):
    friendship = await friend_service.send_friend_request(user_principal, "bob", people, notifier)
    assert friendship.id in people.friendships._store


@pytest.mark.asyncio
async def test_request_rejections(people, notifier, user_principal):
    with pytest.raises(ValidationError):
        await friend_service.send_friend_request(user_principal, "alice", people, notifier)
    with pytest.raises(NotFoundError):
        await friend_service.send_friend_request(user_principal, "ghost", people, notifier)

    people.friendships._store["fr-1"] = make_friendship(requester_id="bob", addressee_id="alice")
    with pytest.raises(ConflictError):
        await friend_service.send_friend_request(user_principal, "bob", people, notifier)


@pytest.mark.asyncio
async def test_accept_notifies_both_parties(people, notifier, registry):
    people.friendships._store["fr-1"] = make_friendship()
    alice = connect(registry, "alice")
    bob = connect(registry, "bob")
    carol = connect(registry, "carol")

    updated = await friend_service.accept_friend_request("fr-1", Principal(user_id="bob"), people, notifier)

    assert updated.status == FriendshipStatus.ACCEPTED
    expected = {
        "type": "friend_request_accepted",
        "friendshipId": "fr-1",
        "requesterId": "alice",
        "addresseeId": "bob",
    }
    assert alice.frames() == [expected]
    assert bob.frames() == [expected]
    assert carol.sent == []


@pytest.mark.asyncio
async def test_reject(people, notifier, registry):
    people.friendships._store["fr-1"] = make_friendship()
    alice = connect(registry, "alice")

    updated = await friend_service.reject_friend_request("fr-1", Principal(user_id="bob"), people, notifier)

    assert updated.status == FriendshipStatus.REJECTED
    assert alice.types() == ["friend_request_rejected"]


@pytest.mark.asyncio
async def test_only_addressee_may_respond(people, notifier, user_principal):
    people.friendships._store["fr-1"] = make_friendship()

    with pytest.raises(ForbiddenError):
        await friend_service.accept_friend_request("fr-1", user_principal, people, notifier)
    with pytest.raises(NotFoundError):
        await friend_service.accept_friend_request("missing", user_principal, people, notifier)


@pytest.mark.asyncio
async def test_cannot_answer_twice(people, notifier):
    people.friendships._store["fr-1"] = make_friendship(status=FriendshipStatus.ACCEPTED)

    with pytest.raises(ConflictError):
        await friend_service.reject_friend_request("fr-1", Principal(user_id="bob"), people, notifier)
