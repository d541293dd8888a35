"""Encrypted wallet slots on top of a KeyValueStore.

Five slots are kept:

* ``matrixchat_wallet``: primary blob, AES-GCM under a key derived from the
  device key (urlsafe base64 of nonce + ciphertext).
* ``matrixchat_wallet_backup``: copy of the primary blob.
* ``matrixchat_wallet_password``: salted scrypt hash that gates ``load``.
* ``matrixchat_wallet_last_backup``: millisecond timestamp of the last backup.
* ``matrixchat_wallet_integrity``: HMAC-SHA256 over primary blob + address.

The blob does not depend on the password, so the signer can be restored
without it after a restart.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
import secrets
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from offchat.application.ports.key_value import KeyValueStore
from offchat.domain.entities.wallet import WalletRecord

logger = logging.getLogger(__name__)

PRIMARY_KEY = "matrixchat_wallet"
BACKUP_KEY = "matrixchat_wallet_backup"
PASSWORD_KEY = "matrixchat_wallet_password"
LAST_BACKUP_KEY = "matrixchat_wallet_last_backup"
INTEGRITY_KEY = "matrixchat_wallet_integrity"

ALL_KEYS = (PRIMARY_KEY, PASSWORD_KEY, BACKUP_KEY, LAST_BACKUP_KEY, INTEGRITY_KEY)

BLOB_VERSION = 2
_AAD = b"offchat-wallet-v2"
_NONCE_SIZE = 12
_SCRYPT_N = 2**14
_SCRYPT_R = 8
_SCRYPT_P = 1


def _subkey(device_key: bytes, purpose: bytes) -> bytes:
    return HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=purpose).derive(device_key)


def _scrypt(password: str, salt: bytes, n: int, r: int, p: int) -> bytes:
    return Scrypt(salt=salt, length=32, n=n, r=r, p=p).derive(password.encode("utf-8"))


class WalletSecretStore:
    def __init__(self, store: KeyValueStore, device_key: bytes) -> None:
        self._store = store
        self._aead = AESGCM(_subkey(device_key, b"offchat wallet encryption"))
        self._mac_key = _subkey(device_key, b"offchat wallet integrity")

    # blob codec

    def encrypt(self, record: WalletRecord, timestamp_ms: int) -> str:
        payload = json.dumps(
            {
                "address": record.address,
                "mnemonic": record.mnemonic,
                "privateKey": record.private_key,
                "timestamp": timestamp_ms,
                "version": BLOB_VERSION,
            }
        ).encode("utf-8")
        nonce = secrets.token_bytes(_NONCE_SIZE)
        ciphertext = self._aead.encrypt(nonce, payload, _AAD)
        return base64.urlsafe_b64encode(nonce + ciphertext).decode("ascii")

    def decrypt(self, blob: str) -> WalletRecord | None:
        """Decode a blob; None when it is corrupt or was sealed under another key."""
        try:
            raw = base64.urlsafe_b64decode(blob.encode("ascii"))
            plaintext = self._aead.decrypt(raw[:_NONCE_SIZE], raw[_NONCE_SIZE:], _AAD)
            data: dict[str, Any] = json.loads(plaintext)
            return WalletRecord(
                address=data["address"],
                mnemonic=data["mnemonic"],
                private_key=data["privateKey"],
            )
        except (binascii.Error, ValueError, InvalidTag, KeyError, TypeError):
            return None

    def integrity_hash(self, blob: str, address: str) -> str:
        return hmac.new(self._mac_key, (blob + address).encode("utf-8"), hashlib.sha256).hexdigest()

    # password

    def _hash_password(self, password: str) -> str:
        salt = secrets.token_bytes(16)
        digest = _scrypt(password, salt, _SCRYPT_N, _SCRYPT_R, _SCRYPT_P)
        return json.dumps(
            {"n": _SCRYPT_N, "r": _SCRYPT_R, "p": _SCRYPT_P, "salt": salt.hex(), "hash": digest.hex()}
        )

    def verify_password(self, password: str) -> bool:
        stored = self._store.get_item(PASSWORD_KEY)
        if stored is None:
            return False
        try:
            params = json.loads(stored)
            expected = bytes.fromhex(params["hash"])
            actual = _scrypt(
                password,
                bytes.fromhex(params["salt"]),
                int(params["n"]),
                int(params["r"]),
                int(params["p"]),
            )
        except (ValueError, KeyError, TypeError):
            logger.warning("Stored wallet password hash is malformed")
            return False
        return hmac.compare_digest(expected, actual)

    # slots

    def has_wallet(self) -> bool:
        return self._store.get_item(PRIMARY_KEY) is not None and self._store.get_item(PASSWORD_KEY) is not None

    def save(self, record: WalletRecord, password: str, now_ms: int) -> None:
        blob = self.encrypt(record, now_ms)
        self._store.set_item(PRIMARY_KEY, blob)
        self._store.set_item(PASSWORD_KEY, self._hash_password(password))
        self._store.set_item(BACKUP_KEY, blob)
        self._store.set_item(LAST_BACKUP_KEY, str(now_ms))
        self._store.set_item(INTEGRITY_KEY, self.integrity_hash(blob, record.address))

    def read(self, slot: str = PRIMARY_KEY) -> WalletRecord | None:
        blob = self._store.get_item(slot)
        return self.decrypt(blob) if blob is not None else None

    def slot_valid(self, slot: str) -> bool:
        if self._store.get_item(PASSWORD_KEY) is None:
            return False
        record = self.read(slot)
        return record is not None and bool(record.address) and bool(record.mnemonic)

    def integrity_ok(self) -> bool:
        blob = self._store.get_item(PRIMARY_KEY)
        expected = self._store.get_item(INTEGRITY_KEY)
        if blob is None or expected is None:
            return False
        record = self.decrypt(blob)
        if record is None:
            return False
        return hmac.compare_digest(expected, self.integrity_hash(blob, record.address))

    def recover_from_backup(self) -> bool:
        """Copy the backup over the primary slot and reseal the integrity hash."""
        if not self.slot_valid(BACKUP_KEY):
            logger.error("Wallet backup slot is missing or corrupt; cannot recover")
            return False
        blob = self._store.get_item(BACKUP_KEY)
        record = self.decrypt(blob) if blob is not None else None
        if blob is None or record is None:
            return False
        self._store.set_item(PRIMARY_KEY, blob)
        self._store.set_item(INTEGRITY_KEY, self.integrity_hash(blob, record.address))
        logger.warning("Wallet primary slot restored from backup")
        return True

    def last_backup_ms(self) -> int | None:
        value = self._store.get_item(LAST_BACKUP_KEY)
        try:
            return int(value) if value is not None else None
        except ValueError:
            return None

    def refresh_backup(self, now_ms: int) -> bool:
        blob = self._store.get_item(PRIMARY_KEY)
        if blob is None or not self.slot_valid(PRIMARY_KEY):
            return False
        self._store.set_item(BACKUP_KEY, blob)
        self._store.set_item(LAST_BACKUP_KEY, str(now_ms))
        return True

    def clear(self) -> None:
        for key in ALL_KEYS:
            self._store.remove_item(key)
