from __future__ import annotations

from offchat.domain.entities.user import User
from offchat.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        username=model.username,
        wallet_address=model.wallet_address,
        avatar=model.avatar,
        is_online=model.is_online,
        last_seen=model.last_seen,
    )
