"""Async JSON-RPC client for one EVM network."""
from __future__ import annotations

import logging
from typing import Any

from eth_utils import to_checksum_address
from web3 import AsyncHTTPProvider, AsyncWeb3

from offchat.domain.value_objects.networks import NetworkConfig

logger = logging.getLogger(__name__)


class EvmClient:
    def __init__(self, network: NetworkConfig, rpc_url: str | None = None) -> None:
        self.network = network
        self._w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url or network.rpc_url))

    async def get_balance(self, address: str) -> int:
        return int(await self._w3.eth.get_balance(to_checksum_address(address)))

    async def call(self, to: str, data: str) -> bytes:
        result = await self._w3.eth.call({"to": to_checksum_address(to), "data": data})
        return bytes(result)

    async def estimate_gas(self, tx: dict[str, Any]) -> int:
        return int(await self._w3.eth.estimate_gas(tx))  # type: ignore[arg-type]

    async def gas_price(self) -> int:
        return int(await self._w3.eth.gas_price)

    async def get_transaction_count(self, address: str) -> int:
        return int(await self._w3.eth.get_transaction_count(to_checksum_address(address), "pending"))

    async def send_raw_transaction(self, raw: bytes) -> str:
        tx_hash = await self._w3.eth.send_raw_transaction(raw)
        logger.info("Submitted transaction %s on %s", tx_hash.hex(), self.network.id)
        return self._w3.to_hex(tx_hash)


def build_client(network: NetworkConfig, overrides: dict[str, str] | None = None) -> EvmClient:
    return EvmClient(network, rpc_url=(overrides or {}).get(network.id))
