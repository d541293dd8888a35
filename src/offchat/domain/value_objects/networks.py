"""Static EVM network and token configuration."""
from __future__ import annotations

from dataclasses import dataclass

NATIVE = "native"


@dataclass(frozen=True, slots=True)
class NetworkConfig:
    id: str
    name: str
    symbol: str
    rpc_url: str
    chain_id: int
    block_explorer: str


@dataclass(frozen=True, slots=True)
class TokenConfig:
    address: str
    symbol: str
    name: str
    decimals: int

    @property
    def is_native(self) -> bool:
        return self.address == NATIVE


MAINNET_ID = "ethereum"

NETWORKS: dict[str, NetworkConfig] = {
    "ethereum": NetworkConfig("ethereum", "Ethereum", "ETH", "https://eth.llamarpc.com", 1, "https://etherscan.io"),
    "bsc": NetworkConfig("bsc", "Binance Smart Chain", "BNB", "https://bsc-dataseed.binance.org", 56, "https://bscscan.com"),
    "arbitrum": NetworkConfig("arbitrum", "Arbitrum One", "ETH", "https://arb1.arbitrum.io/rpc", 42161, "https://arbiscan.io"),
    "polygon": NetworkConfig("polygon", "Polygon", "ETH", "https://polygon-rpc.com", 137, "https://polygonscan.com"),
    "base": NetworkConfig("base", "Base", "ETH", "https://mainnet.base.org", 8453, "https://basescan.org"),
    "optimism": NetworkConfig("optimism", "Optimism", "ETH", "https://mainnet.optimism.io", 10, "https://optimistic.etherscan.io"),
}

OFFC_ADDRESS = "0xaf62c16e46238c14ab8eda78285feb724e7d4444"
OFFC_PAIR_ADDRESS = "0xb8c3cd64fc8ff7220506c9f576b6bdcb8c271bfb"

_ETH = TokenConfig(NATIVE, "ETH", "Ethereum", 18)

SUPPORTED_TOKENS: dict[str, list[TokenConfig]] = {
    "ethereum": [_ETH],
    "bsc": [
        TokenConfig(OFFC_ADDRESS, "OFFC", "Offchat Token", 18),
        TokenConfig(NATIVE, "BNB", "Binance Coin", 18),
    ],
    "arbitrum": [_ETH],
    "polygon": [_ETH],
    "base": [_ETH],
    "optimism": [_ETH],
}

# Well-known tokens scanned during balance discovery.
SCANNABLE_TOKENS: dict[str, list[TokenConfig]] = {
    "bsc": [
        TokenConfig("0x55d398326f99059fF775485246999027B3197955", "USDT", "Tether USD", 18),
        TokenConfig("0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d", "USDC", "USD Coin", 18),
        TokenConfig("0xe9e7CEA3DedcA5984780Bafc599bD69ADd087D56", "BUSD", "Binance USD", 18),
        TokenConfig("0x2170Ed0880ac9A755fd29B2688956BD959F933F8", "ETH", "Ethereum", 18),
        TokenConfig("0x0E09FaBB73Bd3Ade0a17ECC321fD13a19e81cE82", "CAKE", "PancakeSwap", 18),
        TokenConfig("0x7130d2A12B9BCbFAe4f2634d864A1Ee1Ce3Ead9c", "BTCB", "Bitcoin BEP20", 18),
        TokenConfig("0xbA2aE424d960c26247Dd6c32edC70B295c744C43", "DOGE", "Dogecoin", 8),
        TokenConfig("0x1AF3F329e8BE154074D8769D1FFa4eE058B1DBc3", "DAI", "Dai", 18),
    ],
    "ethereum": [
        TokenConfig("0xdAC17F958D2ee523a2206206994597C13D831ec7", "USDT", "Tether USD", 6),
        TokenConfig("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "USDC", "USD Coin", 6),
        TokenConfig("0x6B175474E89094C44Da98b954EedeAC495271d0F", "DAI", "Dai", 18),
        TokenConfig("0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599", "WBTC", "Wrapped BTC", 8),
        TokenConfig("0x514910771AF9Ca656af840dff83E8264EcF986CA", "LINK", "Chainlink", 18),
    ],
    "arbitrum": [
        TokenConfig("0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9", "USDT", "Tether USD", 6),
        TokenConfig("0xaf88d065e77c8cC2239327C5EDb3A432268e5831", "USDC", "USD Coin", 6),
        TokenConfig("0x912CE59144191C1204E64559FE8253a0e49E6548", "ARB", "Arbitrum", 18),
    ],
    "polygon": [
        TokenConfig("0xc2132D05D31c914a87C6611C10748AEb04B58e8F", "USDT", "Tether USD", 6),
        TokenConfig("0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359", "USDC", "USD Coin", 6),
    ],
    "base": [
        TokenConfig("0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", "USDC", "USD Coin", 6),
    ],
    "optimism": [
        TokenConfig("0x94b008aA00579c1307B0EF2c499aD98a8ce58e58", "USDT", "Tether USD", 6),
        TokenConfig("0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85", "USDC", "USD Coin", 6),
        TokenConfig("0x4200000000000000000000000000000000000042", "OP", "Optimism", 18),
    ],
}
