"""Local HD wallet: key custody, balances and transfers across EVM networks."""
from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable
from typing import Any

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import encode_hex, to_checksum_address

from offchat.application.exceptions import (
    InsufficientBalanceError,
    InvalidMnemonicError,
    TransactionFailedError,
    UnsupportedNetworkError,
    ValidationError,
    WalletStorageError,
    WalletUnavailableError,
    WrongPasswordError,
)
from offchat.application.ports.chain import ChainClient, PriceFeed
from offchat.application.ports.key_value import KeyValueStore
from offchat.domain.entities.wallet import TokenBalance, WalletBalance, WalletRecord
from offchat.domain.value_objects.networks import (
    MAINNET_ID,
    NETWORKS,
    SCANNABLE_TOKENS,
    SUPPORTED_TOKENS,
    NetworkConfig,
    TokenConfig,
)
from offchat.infrastructure.evm.erc20 import (
    decode_uint256,
    encode_balance_of,
    encode_transfer,
    format_units,
    parse_units,
)
from offchat.infrastructure.wallet.secret_store import PRIMARY_KEY, WalletSecretStore

logger = logging.getLogger(__name__)

Account.enable_unaudited_hdwallet_features()

CUSTOM_TOKENS_KEY = "offchat_custom_tokens"
NATIVE_TRANSFER_GAS = 21000
GAS_BUFFER_PERCENT = 20
NON_MAINNET_GAS_PRICE = 1_000_000_000  # 1 gwei
ETHER_DECIMALS = 18


def _now_ms() -> int:
    return int(time.time() * 1000)


def _is_insufficient_funds(exc: BaseException) -> bool:
    return "insufficient" in str(exc).lower()


class WalletManager:
    def __init__(
        self,
        secrets: WalletSecretStore,
        store: KeyValueStore,
        chain_factory: Callable[[NetworkConfig], ChainClient],
        price_feed: PriceFeed,
        *,
        restore_attempts: int = 3,
        restore_backoff: float = 0.5,
        maintenance_hours: int = 24,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        self._secrets = secrets
        self._store = store
        self._chain_factory = chain_factory
        self._price_feed = price_feed
        self._restore_attempts = restore_attempts
        self._restore_backoff = restore_backoff
        self._maintenance_ms = maintenance_hours * 60 * 60 * 1000
        self._clock_ms = clock_ms
        self._clients: dict[str, ChainClient] = {}
        self._current_network = MAINNET_ID
        self._account: LocalAccount | None = None

    # key custody

    def generate_wallet(self) -> WalletRecord:
        account, mnemonic = Account.create_with_mnemonic(num_words=12)
        self._account = account
        logger.info("Generated wallet %s", account.address)
        return WalletRecord(address=account.address, mnemonic=mnemonic, private_key=encode_hex(account.key))

    def import_wallet(self, mnemonic: str) -> WalletRecord:
        phrase = " ".join(mnemonic.split())
        try:
            account = Account.from_mnemonic(phrase)
        except Exception as exc:
            raise InvalidMnemonicError() from exc
        self._account = account
        logger.info("Imported wallet %s", account.address)
        return WalletRecord(address=account.address, mnemonic=phrase, private_key=encode_hex(account.key))

    def save_wallet(self, record: WalletRecord, password: str) -> None:
        if not password:
            raise ValidationError("Password is required")
        self._secrets.save(record, password, self._clock_ms())
        logger.info("Wallet %s saved", record.address)

    def load_wallet(self, password: str) -> WalletRecord | None:
        if not self._secrets.has_wallet():
            return None
        if not self._secrets.verify_password(password):
            raise WrongPasswordError()

        record = self._secrets.read(PRIMARY_KEY)
        if record is None and self.validate_wallet_data():
            record = self._secrets.read(PRIMARY_KEY)
        if record is None:
            raise WalletStorageError("Stored wallet data is corrupt and no valid backup exists.")

        self._account = Account.from_mnemonic(record.mnemonic)
        return record

    def has_stored_wallet(self) -> bool:
        return self._secrets.has_wallet()

    def validate_wallet_data(self) -> bool:
        """Check the primary slot and its integrity hash, falling back to the backup."""
        if self._secrets.slot_valid(PRIMARY_KEY) and self._secrets.integrity_ok():
            return True
        logger.warning("Wallet primary slot failed validation; attempting backup recovery")
        return self._secrets.recover_from_backup()

    async def auto_restore_wallet(self) -> bool:
        """Rebuild the in-memory signer from storage without the password."""
        try:
            record = self._secrets.read(PRIMARY_KEY)
            if record is None and self.validate_wallet_data():
                record = self._secrets.read(PRIMARY_KEY)
            if record is None or not record.mnemonic:
                return False
            self._account = Account.from_mnemonic(record.mnemonic)
        except Exception:
            logger.exception("Failed to auto-restore wallet")
            return False
        logger.info("Wallet %s auto-restored", self._account.address)
        return True

    def clear_wallet(self) -> None:
        self._secrets.clear()
        self._account = None
        logger.info("Wallet data cleared from all storage slots")

    def perform_maintenance_check(self) -> bool:
        """Refresh the backup slot when it is older than the maintenance window."""
        now = self._clock_ms()
        last = self._secrets.last_backup_ms()
        if last is not None and now - last <= self._maintenance_ms:
            return False
        refreshed = self._secrets.refresh_backup(now)
        if refreshed:
            logger.info("Wallet backup refreshed")
        return refreshed

    def get_connected_address(self) -> str | None:
        return self._account.address if self._account is not None else None

    # networks

    def switch_network(self, network_id: str) -> NetworkConfig:
        network = self._network(network_id)
        self._current_network = network.id
        logger.info("Switched to %s", network.name)
        return network

    def get_current_network(self) -> NetworkConfig:
        return NETWORKS[self._current_network]

    def get_all_networks(self) -> list[NetworkConfig]:
        return list(NETWORKS.values())

    def _network(self, network_id: str | None) -> NetworkConfig:
        network_id = network_id or self._current_network
        network = NETWORKS.get(network_id)
        if network is None:
            raise UnsupportedNetworkError(f"Unsupported network: {network_id}")
        return network

    def _client(self, network: NetworkConfig) -> ChainClient:
        client = self._clients.get(network.id)
        if client is None:
            client = self._chain_factory(network)
            self._clients[network.id] = client
        return client

    # balances

    async def get_balance(self, address: str, network_id: str | None = None) -> str:
        try:
            network = self._network(network_id)
            wei = await self._client(network).get_balance(address)
        except Exception:
            logger.warning("Failed to get balance on %s", network_id or self._current_network, exc_info=True)
            return "0.0"
        return format_units(wei, ETHER_DECIMALS)

    async def get_token_balance(
        self,
        wallet_address: str,
        token: TokenConfig,
        network_id: str | None = None,
    ) -> str:
        if token.is_native:
            return await self.get_balance(wallet_address, network_id)
        try:
            client = self._client(self._network(network_id))
            raw = await client.call(token.address, encode_balance_of(wallet_address))
            return format_units(decode_uint256(raw), token.decimals)
        except Exception:
            logger.warning("Failed to get %s balance", token.symbol, exc_info=True)
            return "0.0"

    async def get_all_token_balances(
        self,
        wallet_address: str,
        network_id: str | None = None,
    ) -> list[TokenBalance]:
        network = self._network(network_id)
        base_tokens = SUPPORTED_TOKENS.get(network.id, [])
        base_addresses = {t.address.lower() for t in base_tokens}

        merged = list(base_tokens)
        seen = set(base_addresses)
        for token in [*self.get_custom_tokens(network.id), *SCANNABLE_TOKENS.get(network.id, [])]:
            if token.address.lower() not in seen:
                merged.append(token)
                seen.add(token.address.lower())

        balances = await asyncio.gather(
            *(self.get_token_balance(wallet_address, token, network.id) for token in merged)
        )
        found = [
            TokenBalance(token=token, balance=balance)
            for token, balance in zip(merged, balances)
            if float(balance) > 0
        ]
        for item in found:
            if not item.token.is_native and item.token.address.lower() not in base_addresses:
                self.add_custom_token(network.id, item.token)
        return found

    def add_custom_token(self, network_id: str, token: TokenConfig) -> None:
        stored = self._custom_tokens()
        entries = stored.setdefault(network_id, [])
        if any(e.get("address", "").lower() == token.address.lower() for e in entries):
            return
        entries.append(
            {"address": token.address, "symbol": token.symbol, "name": token.name, "decimals": token.decimals}
        )
        self._store.set_item(CUSTOM_TOKENS_KEY, json.dumps(stored))

    def get_custom_tokens(self, network_id: str) -> list[TokenConfig]:
        tokens = []
        for entry in self._custom_tokens().get(network_id, []):
            try:
                tokens.append(
                    TokenConfig(entry["address"], entry["symbol"], entry["name"], int(entry["decimals"]))
                )
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed custom token entry on %s", network_id)
        return tokens

    def _custom_tokens(self) -> dict[str, list[dict[str, Any]]]:
        raw = self._store.get_item(CUSTOM_TOKENS_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Custom token list is corrupt; ignoring it")
            return {}
        return data if isinstance(data, dict) else {}

    async def get_token_price(self, symbol: str) -> float:
        return await self._price_feed.get_price(symbol)

    async def get_multi_network_balance(self, address: str) -> list[WalletBalance]:
        return list(
            await asyncio.gather(*(self._network_balance(address, n) for n in NETWORKS.values()))
        )

    async def _network_balance(self, address: str, network: NetworkConfig) -> WalletBalance:
        try:
            wei, price = await asyncio.gather(
                self._client(network).get_balance(address),
                self._price_feed.get_price(network.symbol),
            )
            balance = float(format_units(wei, ETHER_DECIMALS))
        except Exception:
            logger.warning("Failed to get balance for %s", network.name, exc_info=True)
            return WalletBalance(network.id, "0.0000", "0.00", network.symbol)
        return WalletBalance(network.id, f"{balance:.4f}", f"{balance * price:.2f}", network.symbol)

    # transfers

    async def _ensure_signer(self) -> LocalAccount:
        for attempt in range(1, self._restore_attempts + 1):
            if self._account is not None:
                break
            logger.info("Attempting to restore wallet (attempt %d/%d)", attempt, self._restore_attempts)
            if await self.auto_restore_wallet():
                break
            if attempt < self._restore_attempts:
                await asyncio.sleep(self._restore_backoff)
        if self._account is None:
            raise WalletUnavailableError()
        return self._account

    async def _sign_and_send(self, client: ChainClient, account: LocalAccount, tx: dict[str, Any]) -> str:
        tx["nonce"] = await client.get_transaction_count(account.address)
        signed = account.sign_transaction(tx)
        return await client.send_raw_transaction(signed.raw_transaction)

    async def send_transaction(self, to: str, amount: str, network_id: str | None = None) -> str:
        account = await self._ensure_signer()
        network = self._network(network_id)
        client = self._client(network)
        try:
            value = parse_units(amount, ETHER_DECIMALS)
            recipient = to_checksum_address(to)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        try:
            tx_hash = await self._sign_and_send(
                client,
                account,
                {
                    "to": recipient,
                    "value": value,
                    "gas": NATIVE_TRANSFER_GAS,
                    "gasPrice": await client.gas_price(),
                    "chainId": network.chain_id,
                },
            )
        except Exception as exc:
            logger.error("Native transfer on %s failed: %s", network.id, exc)
            if _is_insufficient_funds(exc):
                raise InsufficientBalanceError("Insufficient balance.") from exc
            raise TransactionFailedError(f"Transaction failed: {exc}") from exc
        logger.info("Native transfer sent on %s: %s", network.id, tx_hash)
        return tx_hash

    async def send_token_transaction(
        self,
        to: str,
        amount: str,
        token: TokenConfig,
        network_id: str | None = None,
    ) -> str:
        account = await self._ensure_signer()
        if token.is_native:
            return await self.send_transaction(to, amount, network_id)

        network = self._network(network_id)
        client = self._client(network)
        try:
            units = parse_units(amount, token.decimals)
            recipient = to_checksum_address(to)
            contract = to_checksum_address(token.address)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        insufficient = f"Insufficient {token.symbol} balance."
        try:
            balance = decode_uint256(await client.call(contract, encode_balance_of(account.address)))
            if balance < units:
                raise InsufficientBalanceError(insufficient)

            data = encode_transfer(recipient, units)
            estimated = await client.estimate_gas({"from": account.address, "to": contract, "data": data})
            gas_price = await client.gas_price() if network.id == MAINNET_ID else NON_MAINNET_GAS_PRICE
            tx_hash = await self._sign_and_send(
                client,
                account,
                {
                    "to": contract,
                    "value": 0,
                    "data": data,
                    "gas": estimated + estimated * GAS_BUFFER_PERCENT // 100,
                    "gasPrice": gas_price,
                    "chainId": network.chain_id,
                },
            )
        except InsufficientBalanceError:
            raise
        except Exception as exc:
            logger.error("%s transfer on %s failed: %s", token.symbol, network.id, exc)
            if _is_insufficient_funds(exc):
                raise InsufficientBalanceError(insufficient) from exc
            raise TransactionFailedError(f"{token.symbol} transaction failed: {exc}") from exc
        logger.info("%s transfer sent on %s: %s", token.symbol, network.id, tx_hash)
        return tx_hash
