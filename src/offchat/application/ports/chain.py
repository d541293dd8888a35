from __future__ import annotations

from typing import Any, Protocol


class ChainClient(Protocol):
    """JSON-RPC surface of one EVM network used by the wallet manager."""

    async def get_balance(self, address: str) -> int: ...

    async def call(self, to: str, data: str) -> bytes: ...

    async def estimate_gas(self, tx: dict[str, Any]) -> int: ...

    async def gas_price(self) -> int: ...

    async def get_transaction_count(self, address: str) -> int: ...

    async def send_raw_transaction(self, raw: bytes) -> str: ...


class PriceFeed(Protocol):
    async def get_price(self, symbol: str) -> float: ...
