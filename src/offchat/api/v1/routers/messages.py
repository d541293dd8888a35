from __future__ import annotations

from fastapi import APIRouter, Query

from offchat.api.deps import BroadcasterDep, CurrentPrincipal, UoWDep
from offchat.api.v1.schemas.common import DetailResponse
from offchat.api.v1.schemas.message import MessageResponse
from offchat.services import message_service, moderation_service

router = APIRouter(prefix="/api/v1", tags=["messages"])


@router.get("/chats/{chat_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    chat_id: str,
    principal: CurrentPrincipal,
    uow: UoWDep,
    limit: int = Query(100, ge=1, le=500),
) -> list[MessageResponse]:
    messages = await message_service.list_messages(chat_id, principal.user_id, uow, limit=limit)
    return [MessageResponse.model_validate(m, from_attributes=True) for m in messages]


@router.delete("/messages/{message_id}", response_model=DetailResponse)
async def delete_message(
    message_id: str,
    principal: CurrentPrincipal,
    uow: UoWDep,
    broadcaster: BroadcasterDep,
    delete_for_everyone: bool = Query(False),
) -> DetailResponse:
    await moderation_service.delete_message(
        message_id, principal, delete_for_everyone, uow, broadcaster,
    )
    return DetailResponse(detail="Message deleted successfully")
