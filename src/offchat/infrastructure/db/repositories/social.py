from __future__ import annotations

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from offchat.domain.entities.friendship import Friendship
from offchat.domain.entities.moderation import BlockRelation
from offchat.domain.entities.nft import Nft
from offchat.domain.value_objects.enums import FriendshipStatus
from offchat.infrastructure.db.mappers import social as mapper
from offchat.infrastructure.db.models.nft import NftModel
from offchat.infrastructure.db.models.social import BlockedUserModel, FriendshipModel


class BlockReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def is_blocked(self, blocker_id: str, blocked_id: str) -> bool:
        stmt = (
            select(BlockedUserModel.id)
            .where(
                BlockedUserModel.blocker_id == blocker_id,
                BlockedUserModel.blocked_id == blocked_id,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_blocked(self, blocker_id: str) -> list[BlockRelation]:
        stmt = (
            select(BlockedUserModel)
            .where(BlockedUserModel.blocker_id == blocker_id)
            .order_by(BlockedUserModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [mapper.block_to_entity(m) for m in result.scalars().all()]


class BlockWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def block(self, blocker_id: str, blocked_id: str) -> BlockRelation:
        stmt = (
            pg_insert(BlockedUserModel)
            .values(blocker_id=blocker_id, blocked_id=blocked_id)
            .on_conflict_do_nothing(constraint="uq_blocked_pair")
        )
        await self._session.execute(stmt)
        existing = await self._session.execute(
            select(BlockedUserModel).where(
                BlockedUserModel.blocker_id == blocker_id,
                BlockedUserModel.blocked_id == blocked_id,
            )
        )
        return mapper.block_to_entity(existing.scalar_one())

    async def unblock(self, blocker_id: str, blocked_id: str) -> bool:
        stmt = delete(BlockedUserModel).where(
            BlockedUserModel.blocker_id == blocker_id,
            BlockedUserModel.blocked_id == blocked_id,
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)


class NftReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, nft_id: str) -> Nft | None:
        model = await self._session.get(NftModel, nft_id)
        return mapper.nft_to_entity(model) if model else None


class FriendshipReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, friendship_id: str) -> Friendship | None:
        model = await self._session.get(FriendshipModel, friendship_id)
        return mapper.friendship_to_entity(model) if model else None

    async def find_between(self, user_a: str, user_b: str) -> Friendship | None:
        stmt = (
            select(FriendshipModel)
            .where(
                or_(
                    and_(
                        FriendshipModel.requester_id == user_a,
                        FriendshipModel.addressee_id == user_b,
                    ),
                    and_(
                        FriendshipModel.requester_id == user_b,
                        FriendshipModel.addressee_id == user_a,
                    ),
                )
            )
            .order_by(FriendshipModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.friendship_to_entity(model) if model else None


class FriendshipWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, requester_id: str, addressee_id: str) -> Friendship:
        stmt = (
            pg_insert(FriendshipModel)
            .values(
                requester_id=requester_id,
                addressee_id=addressee_id,
                status=FriendshipStatus.PENDING.value,
            )
            .returning(FriendshipModel)
        )
        result = await self._session.execute(stmt)
        return mapper.friendship_to_entity(result.scalar_one())

    async def set_status(self, friendship_id: str, status: str) -> Friendship | None:
        stmt = (
            update(FriendshipModel)
            .where(FriendshipModel.id == friendship_id)
            .values(status=str(status), updated_at=func.now())
            .returning(FriendshipModel)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.friendship_to_entity(model) if model else None
