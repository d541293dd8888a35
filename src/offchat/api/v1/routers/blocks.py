from __future__ import annotations

from fastapi import APIRouter, Response

from offchat.api.deps import CurrentPrincipal, UoWDep
from offchat.api.v1.schemas.social import BlockRequest, BlockResponse
from offchat.services import moderation_service

router = APIRouter(prefix="/api/v1/blocks", tags=["blocks"])


@router.get("", response_model=list[BlockResponse])
async def list_blocked(principal: CurrentPrincipal, uow: UoWDep) -> list[BlockResponse]:
    relations = await moderation_service.list_blocked(principal, uow)
    return [BlockResponse.model_validate(r, from_attributes=True) for r in relations]


@router.post("", response_model=BlockResponse, status_code=201)
async def block_user(body: BlockRequest, principal: CurrentPrincipal, uow: UoWDep) -> BlockResponse:
    relation = await moderation_service.block_user(principal, body.user_id, uow)
    return BlockResponse.model_validate(relation, from_attributes=True)


@router.delete("/{user_id}", status_code=204)
async def unblock_user(user_id: str, principal: CurrentPrincipal, uow: UoWDep) -> Response:
    await moderation_service.unblock_user(principal, user_id, uow)
    return Response(status_code=204)
