"""USD price lookup with a fallback chain of public APIs."""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Any, Self

import httpx

from offchat.domain.value_objects.networks import OFFC_ADDRESS, OFFC_PAIR_ADDRESS

logger = logging.getLogger(__name__)

DEXSCREENER_URL = "https://api.dexscreener.com/latest/dex"
PANCAKESWAP_URL = "https://api.pancakeswap.info/api/v2/tokens"
COINGECKO_URL = "https://api.coingecko.com/api/v3"

FALLBACK_PRICES: dict[str, float] = {
    "ETH": 2500.0,
    "BNB": 600.0,
    "OFFC": 0.00006,
}

COINGECKO_IDS: dict[str, str] = {
    "ETH": "ethereum",
    "BNB": "binancecoin",
    "USDT": "tether",
    "USDC": "usd-coin",
    "DAI": "dai",
}


def _positive(value: Any) -> float | None:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if price > 0 else None


class HttpPriceFeed:
    def __init__(self, client: httpx.AsyncClient | None = None, *, timeout: float = 5.0) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get_price(self, symbol: str) -> float:
        symbol = symbol.upper()
        sources: list[tuple[str, Callable[[], Awaitable[float | None]]]]
        if symbol == "OFFC":
            sources = [
                ("dexscreener-pair", self._dexscreener_pair),
                ("dexscreener-token", self._dexscreener_token),
                ("pancakeswap", self._pancakeswap),
                ("coingecko-token", self._coingecko_token),
            ]
        else:
            sources = [("coingecko", lambda: self._coingecko_simple(symbol))]

        for name, source in sources:
            try:
                price = await source()
            except (httpx.HTTPError, ValueError, KeyError, TypeError, IndexError) as exc:
                logger.info("Price source %s failed for %s: %s", name, symbol, exc)
                continue
            if price is not None:
                logger.debug("%s price from %s: %s", symbol, name, price)
                return price

        fallback = FALLBACK_PRICES.get(symbol, 0.0)
        logger.warning("All price sources failed for %s; using fallback %s", symbol, fallback)
        return fallback

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        response = await self._client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    async def _dexscreener_pair(self) -> float | None:
        data = await self._get_json(f"{DEXSCREENER_URL}/pairs/bsc/{OFFC_PAIR_ADDRESS}")
        pairs = data.get("pairs") or []
        return _positive(pairs[0].get("priceUsd")) if pairs else None

    async def _dexscreener_token(self) -> float | None:
        data = await self._get_json(f"{DEXSCREENER_URL}/tokens/{OFFC_ADDRESS}")
        priced = [p for p in data.get("pairs") or [] if _positive(p.get("priceUsd"))]
        if not priced:
            return None
        preferred = next(
            (p for p in priced if str(p.get("pairAddress", "")).lower() == OFFC_PAIR_ADDRESS),
            priced[0],
        )
        return _positive(preferred["priceUsd"])

    async def _pancakeswap(self) -> float | None:
        data = await self._get_json(f"{PANCAKESWAP_URL}/{OFFC_ADDRESS}")
        return _positive((data.get("data") or {}).get("price"))

    async def _coingecko_token(self) -> float | None:
        data = await self._get_json(
            f"{COINGECKO_URL}/simple/token_price/binance-smart-chain",
            params={"contract_addresses": OFFC_ADDRESS, "vs_currencies": "usd"},
        )
        return _positive((data.get(OFFC_ADDRESS) or {}).get("usd"))

    async def _coingecko_simple(self, symbol: str) -> float | None:
        coin_id = COINGECKO_IDS.get(symbol)
        if coin_id is None:
            return None
        data = await self._get_json(
            f"{COINGECKO_URL}/simple/price",
            params={"ids": coin_id, "vs_currencies": "usd"},
        )
        return _positive((data.get(coin_id) or {}).get("usd"))
