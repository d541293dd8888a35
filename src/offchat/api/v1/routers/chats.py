from __future__ import annotations

from fastapi import APIRouter, Query

from offchat.api.deps import BroadcasterDep, CurrentPrincipal, UoWDep
from offchat.api.v1.schemas.chat import BanRequest, BannedMemberResponse, KickRequest
from offchat.api.v1.schemas.common import DetailResponse
from offchat.services import moderation_service

router = APIRouter(prefix="/api/v1/chats", tags=["chats"])


@router.delete("/{chat_id}", response_model=DetailResponse)
async def delete_chat(
    chat_id: str,
    principal: CurrentPrincipal,
    uow: UoWDep,
    broadcaster: BroadcasterDep,
    delete_for_everyone: bool = Query(False),
) -> DetailResponse:
    await moderation_service.delete_chat(chat_id, principal, delete_for_everyone, uow, broadcaster)
    return DetailResponse(detail="Chat deleted successfully")


@router.post("/{chat_id}/kick", response_model=DetailResponse)
async def kick_user(
    chat_id: str,
    body: KickRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    broadcaster: BroadcasterDep,
) -> DetailResponse:
    await moderation_service.kick_user(chat_id, body.user_id, principal, uow, broadcaster)
    return DetailResponse(detail="User removed successfully")


@router.post("/{chat_id}/ban", response_model=BannedMemberResponse)
async def ban_user(
    chat_id: str,
    body: BanRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    broadcaster: BroadcasterDep,
) -> BannedMemberResponse:
    banned = await moderation_service.ban_user(
        chat_id, body.user_id, principal, body.reason, uow, broadcaster,
    )
    return BannedMemberResponse.model_validate(banned, from_attributes=True)
