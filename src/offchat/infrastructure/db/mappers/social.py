from __future__ import annotations

from offchat.domain.entities.friendship import Friendship
from offchat.domain.entities.moderation import BlockRelation
from offchat.domain.entities.nft import Nft
from offchat.infrastructure.db.models.nft import NftModel
from offchat.infrastructure.db.models.social import BlockedUserModel, FriendshipModel


def friendship_to_entity(model: FriendshipModel) -> Friendship:
    return Friendship(
        id=model.id,
        requester_id=model.requester_id,
        addressee_id=model.addressee_id,
        status=model.status,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def block_to_entity(model: BlockedUserModel) -> BlockRelation:
    return BlockRelation(
        blocker_id=model.blocker_id,
        blocked_id=model.blocked_id,
        created_at=model.created_at,
    )


def nft_to_entity(model: NftModel) -> Nft:
    return Nft(
        id=model.id,
        owner_id=model.owner_id,
        contract_address=model.contract_address,
        token_id=model.token_id,
        name=model.name,
        chain=model.chain,
        image_url=model.image_url,
        collection_name=model.collection_name,
    )
