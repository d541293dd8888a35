from __future__ import annotations

import base64
import binascii
import logging
import os
import secrets
from pathlib import Path

from offchat.application.exceptions import WalletStorageError

logger = logging.getLogger(__name__)

KEY_SIZE = 32


def decode_device_key(value: str) -> bytes:
    try:
        key = base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
    except (binascii.Error, ValueError) as exc:
        raise WalletStorageError("WALLET_DEVICE_KEY must be urlsafe base64") from exc
    if len(key) != KEY_SIZE:
        raise WalletStorageError(f"WALLET_DEVICE_KEY must decode to {KEY_SIZE} bytes")
    return key


def resolve_device_key(configured: str, key_path: str | Path) -> bytes:
    """Return the configured key, or load/create one in a 0600 file."""
    if configured:
        return decode_device_key(configured)

    path = Path(key_path).expanduser()
    if path.exists():
        return decode_device_key(path.read_text(encoding="ascii").strip())

    key = secrets.token_bytes(KEY_SIZE)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "w", encoding="ascii") as f:
        f.write(base64.urlsafe_b64encode(key).decode("ascii"))
    logger.info("Generated new wallet device key at %s", path)
    return key
