from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Nft:
    id: str
    owner_id: str
    contract_address: str
    token_id: str
    name: str
    chain: str
    image_url: str | None = None
    collection_name: str | None = None
