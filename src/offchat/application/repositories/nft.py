from __future__ import annotations

from typing import Protocol

from offchat.domain.entities.nft import Nft


class NftReader(Protocol):
    async def get_by_id(self, nft_id: str) -> Nft | None: ...
