"""Import all models so Alembic can discover them via Base.metadata."""
from offchat.infrastructure.db.models.chat import (
    BannedMemberModel,
    ChatModel,
    ChatParticipantModel,
)
from offchat.infrastructure.db.models.message import MessageModel
from offchat.infrastructure.db.models.nft import NftModel
from offchat.infrastructure.db.models.social import BlockedUserModel, FriendshipModel
from offchat.infrastructure.db.models.user import UserModel

__all__ = [
    "BannedMemberModel",
    "BlockedUserModel",
    "ChatModel",
    "ChatParticipantModel",
    "FriendshipModel",
    "MessageModel",
    "NftModel",
    "UserModel",
]
