from __future__ import annotations

import logging

from offchat.application.dto.principal import Principal
from offchat.application.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from offchat.application.uow import UnitOfWork
from offchat.domain.entities.friendship import Friendship
from offchat.domain.entities.user import User
from offchat.domain.value_objects.enums import FriendshipStatus
from offchat.infrastructure.ws.protocol import (
    FriendRequestAcceptedFrame,
    FriendRequestReceivedFrame,
    FriendRequestRejectedFrame,
    FriendshipPayload,
    RequesterProfile,
)
from offchat.services.broadcast_service import ChatBroadcaster

logger = logging.getLogger(__name__)


class FriendNotifier:
    """Pushes friendship events to the two users involved, keyed by user id."""

    def __init__(self, broadcaster: ChatBroadcaster) -> None:
        self._broadcaster = broadcaster

    async def request_sent(self, friendship: Friendship, requester: User) -> bool:
        frame = FriendRequestReceivedFrame(
            friendship=FriendshipPayload.from_entity(friendship),
            requester=RequesterProfile.from_entity(requester),
        )
        delivered = await self._broadcaster.send_to_user(friendship.addressee_id, frame)
        if not delivered:
            logger.debug("User %s not connected; friend request stays pending", friendship.addressee_id)
        return delivered

    async def request_accepted(self, friendship: Friendship) -> int:
        frame = FriendRequestAcceptedFrame(
            friendship_id=friendship.id,
            requester_id=friendship.requester_id,
            addressee_id=friendship.addressee_id,
        )
        return await self._notify_parties(friendship, frame)

    async def request_rejected(self, friendship: Friendship) -> int:
        frame = FriendRequestRejectedFrame(
            friendship_id=friendship.id,
            requester_id=friendship.requester_id,
            addressee_id=friendship.addressee_id,
        )
        return await self._notify_parties(friendship, frame)

    async def _notify_parties(
        self,
        friendship: Friendship,
        frame: FriendRequestAcceptedFrame | FriendRequestRejectedFrame,
    ) -> int:
        sent = 0
        for user_id in (friendship.requester_id, friendship.addressee_id):
            if await self._broadcaster.send_to_user(user_id, frame):
                sent += 1
        return sent


async def send_friend_request(
    principal: Principal,
    addressee_id: str,
    uow: UnitOfWork,
    notifier: FriendNotifier,
) -> Friendship:
    requester_id = principal.user_id
    if requester_id == addressee_id:
        raise ValidationError("You cannot send a friend request to yourself")

    requester = await uow.users.get_by_id(requester_id)
    if requester is None:
        raise NotFoundError("Requester not found")
    if await uow.users.get_by_id(addressee_id) is None:
        raise NotFoundError("User not found")

    if await uow.friendships.find_between(requester_id, addressee_id) is not None:
        raise ConflictError("Friendship request already exists")

    friendship = await uow.friendships_w.create(requester_id, addressee_id)
    await uow.commit()

    await notifier.request_sent(friendship, requester)
    return friendship


async def _respond(
    friendship_id: str,
    principal: Principal,
    status: FriendshipStatus,
    uow: UnitOfWork,
) -> Friendship:
    friendship = await uow.friendships.get_by_id(friendship_id)
    if friendship is None:
        raise NotFoundError("Friendship not found")
    if friendship.addressee_id != principal.user_id:
        raise ForbiddenError("Only the addressee can respond to a friend request")
    if friendship.status != FriendshipStatus.PENDING:
        raise ConflictError(f"Friend request is already {friendship.status}")

    updated = await uow.friendships_w.set_status(friendship_id, status)
    if updated is None:
        raise NotFoundError("Friendship not found")
    await uow.commit()
    return updated


async def accept_friend_request(
    friendship_id: str,
    principal: Principal,
    uow: UnitOfWork,
    notifier: FriendNotifier,
) -> Friendship:
    friendship = await _respond(friendship_id, principal, FriendshipStatus.ACCEPTED, uow)
    await notifier.request_accepted(friendship)
    return friendship


async def reject_friend_request(
    friendship_id: str,
    principal: Principal,
    uow: UnitOfWork,
    notifier: FriendNotifier,
) -> Friendship:
    friendship = await _respond(friendship_id, principal, FriendshipStatus.REJECTED, uow)
    await notifier.request_rejected(friendship)
    return friendship
