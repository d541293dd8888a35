from __future__ import annotations

from dataclasses import dataclass

from offchat.domain.value_objects.networks import TokenConfig


@dataclass(frozen=True, slots=True)
class WalletRecord:
    """Plaintext wallet material. Never logged, never sent over the wire."""

    address: str
    mnemonic: str
    private_key: str

    def __repr__(self) -> str:
        return f"WalletRecord(address={self.address!r})"


@dataclass(frozen=True, slots=True)
class WalletBalance:
    network_id: str
    balance: str
    balance_usd: str
    symbol: str


@dataclass(frozen=True, slots=True)
class TokenBalance:
    token: TokenConfig
    balance: str
