from __future__ import annotations

from fastapi import APIRouter

from offchat.api.deps import CurrentPrincipal, FriendNotifierDep, UoWDep
from offchat.api.v1.schemas.social import FriendRequestCreate, FriendshipResponse
from offchat.services import friend_service

router = APIRouter(prefix="/api/v1/friends", tags=["friends"])


@router.post("/requests", response_model=FriendshipResponse, status_code=201)
async def send_friend_request(
    body: FriendRequestCreate,
    principal: CurrentPrincipal,
    uow: UoWDep,
    notifier: FriendNotifierDep,
) -> FriendshipResponse:
    friendship = await friend_service.send_friend_request(principal, body.addressee_id, uow, notifier)
    return FriendshipResponse.model_validate(friendship, from_attributes=True)


@router.put("/{friendship_id}/accept", response_model=FriendshipResponse)
async def accept_friend_request(
    friendship_id: str,
    principal: CurrentPrincipal,
    uow: UoWDep,
    notifier: FriendNotifierDep,
) -> FriendshipResponse:
    friendship = await friend_service.accept_friend_request(friendship_id, principal, uow, notifier)
    return FriendshipResponse.model_validate(friendship, from_attributes=True)


@router.put("/{friendship_id}/reject", response_model=FriendshipResponse)
async def reject_friend_request(
    friendship_id: str,
    principal: CurrentPrincipal,
    uow: UoWDep,
    notifier: FriendNotifierDep,
) -> FriendshipResponse:
    friendship = await friend_service.reject_friend_request(friendship_id, principal, uow, notifier)
    return FriendshipResponse.model_validate(friendship, from_attributes=True)
