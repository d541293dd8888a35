from __future__ import annotations

from enum import StrEnum


class ParticipantRole(StrEnum):
    MEMBER = "member"
    ADMIN = "admin"
    OWNER = "owner"


class MessageType(StrEnum):
    TEXT = "text"
    MEDIA = "media"
    CRYPTO_TRANSACTION = "crypto_transaction"
    NFT = "nft"


class FriendshipStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    BLOCKED = "blocked"
