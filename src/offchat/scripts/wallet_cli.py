"""Command-line front end for the local wallet.

    python -m offchat.scripts.wallet_cli generate --password ...
    python -m offchat.scripts.wallet_cli balances
    python -m offchat.scripts.wallet_cli send-token 0xabc... 1.5 OFFC --network bsc
"""
from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
from pathlib import Path

from offchat.application.exceptions import AppError
from offchat.config import settings
from offchat.domain.value_objects.networks import SUPPORTED_TOKENS, TokenConfig
from offchat.infrastructure.evm.client import build_client
from offchat.infrastructure.wallet.device_key import resolve_device_key
from offchat.infrastructure.wallet.price_feed import HttpPriceFeed
from offchat.infrastructure.wallet.secret_store import WalletSecretStore
from offchat.infrastructure.wallet.storage import JsonFileKeyValueStore
from offchat.services.wallet_manager import WalletManager

logger = logging.getLogger(__name__)


def build_wallet_manager(price_feed: HttpPriceFeed) -> WalletManager:
    storage_path = Path(settings.WALLET_STORAGE_PATH).expanduser()
    store = JsonFileKeyValueStore(storage_path)
    device_key = resolve_device_key(
        settings.WALLET_DEVICE_KEY,
        storage_path.with_name(storage_path.name + ".key"),
    )
    return WalletManager(
        WalletSecretStore(store, device_key),
        store,
        lambda network: build_client(network, settings.RPC_URL_OVERRIDES),
        price_feed,
        restore_attempts=settings.WALLET_RESTORE_ATTEMPTS,
        restore_backoff=settings.WALLET_RESTORE_BACKOFF_SECONDS,
        maintenance_hours=settings.WALLET_MAINTENANCE_HOURS,
    )


def _password(args: argparse.Namespace) -> str:
    return args.password or getpass.getpass("Wallet password: ")


async def run(args: argparse.Namespace) -> None:
    async with HttpPriceFeed(timeout=settings.PRICE_FEED_TIMEOUT_SECONDS) as price_feed:
        manager = build_wallet_manager(price_feed)
        manager.perform_maintenance_check()

        if args.command == "generate":
            record = manager.generate_wallet()
            manager.save_wallet(record, _password(args))
            print(f"Address:  {record.address}")
            print(f"Mnemonic: {record.mnemonic}")
        elif args.command == "import":
            record = manager.import_wallet(args.mnemonic)
            manager.save_wallet(record, _password(args))
            print(f"Imported {record.address}")
        elif args.command == "unlock":
            record = manager.load_wallet(_password(args))
            print(record.address if record else "No stored wallet")
        elif args.command == "validate":
            print("ok" if manager.validate_wallet_data() else "corrupt")
        elif args.command == "clear":
            manager.clear_wallet()
        elif args.command == "networks":
            for network in manager.get_all_networks():
                print(f"{network.id:10} {network.name:20} {network.symbol:4} chain={network.chain_id}")
        elif args.command == "balances":
            address = await _address(manager)
            for balance in await manager.get_multi_network_balance(address):
                print(f"{balance.network_id:10} {balance.balance:>14} {balance.symbol:4} ${balance.balance_usd}")
            for item in await manager.get_all_token_balances(address, args.network):
                print(f"{args.network:10} {item.balance:>14} {item.token.symbol}")
        elif args.command == "price":
            print(await manager.get_token_price(args.symbol))
        elif args.command == "send":
            print(await manager.send_transaction(args.to, args.amount, args.network))
        elif args.command == "send-token":
            token = _find_token(manager, args.network, args.symbol)
            print(await manager.send_token_transaction(args.to, args.amount, token, args.network))


async def _address(manager: WalletManager) -> str:
    if manager.get_connected_address() is None:
        await manager.auto_restore_wallet()
    address = manager.get_connected_address()
    if address is None:
        raise SystemExit("No wallet available; run 'generate' or 'import' first")
    return address


def _find_token(manager: WalletManager, network_id: str, symbol: str) -> TokenConfig:
    candidates = [*SUPPORTED_TOKENS.get(network_id, []), *manager.get_custom_tokens(network_id)]
    for token in candidates:
        if token.symbol.upper() == symbol.upper():
            return token
    raise SystemExit(f"Unknown token {symbol} on {network_id}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="offchat-wallet")
    parser.add_argument("--password", help="wallet password (prompted when omitted)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("generate")
    imp = sub.add_parser("import")
    imp.add_argument("mnemonic")
    sub.add_parser("unlock")
    sub.add_parser("validate")
    sub.add_parser("clear")
    sub.add_parser("networks")
    bal = sub.add_parser("balances")
    bal.add_argument("--network", default="bsc")
    price = sub.add_parser("price")
    price.add_argument("symbol")
    send = sub.add_parser("send")
    send.add_argument("to")
    send.add_argument("amount")
    send.add_argument("--network", default="ethereum")
    send_token = sub.add_parser("send-token")
    send_token.add_argument("to")
    send_token.add_argument("amount")
    send_token.add_argument("symbol")
    send_token.add_argument("--network", default="bsc")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    try:
        asyncio.run(run(args))
    except AppError as exc:
        raise SystemExit(exc.detail) from exc


if __name__ == "__main__":
    main()
