from __future__ import annotations

import base64
import json
import stat

import pytest

from offchat.application.exceptions import WalletStorageError
from offchat.domain.entities.wallet import WalletRecord
from offchat.infrastructure.wallet.device_key import decode_device_key, resolve_device_key
from offchat.infrastructure.wallet.secret_store import (
    INTEGRITY_KEY,
    PASSWORD_KEY,
    PRIMARY_KEY,
    WalletSecretStore,
)
from offchat.infrastructure.wallet.storage import InMemoryKeyValueStore, JsonFileKeyValueStore

RECORD = WalletRecord(
    address="0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
    mnemonic="test test test test test test test test test test test junk",
    private_key="0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80",
)


@pytest.fixture
def secrets_store() -> WalletSecretStore:
    return WalletSecretStore(InMemoryKeyValueStore(), b"\x01" * 32)


def test_blob_round_trip_and_key_binding():
    store = WalletSecretStore(InMemoryKeyValueStore(), b"\x01" * 32)
    other = WalletSecretStore(InMemoryKeyValueStore(), b"\x02" * 32)

    blob = store.encrypt(RECORD, 0)

    assert store.decrypt(blob) == RECORD
    assert other.decrypt(blob) is None
    assert store.decrypt("not base64 at all!") is None
    assert RECORD.mnemonic not in blob


def test_password_is_hashed(secrets_store):
    secrets_store.save(RECORD, "correct horse", 1)

    assert secrets_store.verify_password("correct horse")
    assert not secrets_store.verify_password("wrong")
    assert "correct horse" not in secrets_store._store.get_item(PASSWORD_KEY)


def test_tampered_integrity_is_detected(secrets_store):
    secrets_store.save(RECORD, "pw", 1)
    assert secrets_store.integrity_ok()

    secrets_store._store.set_item(INTEGRITY_KEY, "0" * 64)
    assert not secrets_store.integrity_ok()

    assert secrets_store.recover_from_backup()
    assert secrets_store.integrity_ok()


def test_clear_removes_all_slots(secrets_store):
    secrets_store.save(RECORD, "pw", 1)
    secrets_store.clear()

    assert not secrets_store.has_wallet()
    assert secrets_store.read(PRIMARY_KEY) is None
    assert secrets_store.last_backup_ms() is None


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "wallet.json"
    JsonFileKeyValueStore(path).set_item("a", "1")

    reopened = JsonFileKeyValueStore(path)

    assert reopened.get_item("a") == "1"
    assert json.loads(path.read_text()) == {"a": "1"}
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert not (tmp_path / "nested" / "wallet.json.tmp").exists()


def test_json_store_remove(tmp_path):
    store = JsonFileKeyValueStore(tmp_path / "wallet.json")
    store.set_item("a", "1")
    store.remove_item("a")
    store.remove_item("missing")

    assert JsonFileKeyValueStore(tmp_path / "wallet.json").get_item("a") is None


def test_json_store_corrupt_file(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text("{not json")

    with pytest.raises(WalletStorageError):
        JsonFileKeyValueStore(path)


def test_device_key_generated_once(tmp_path):
    key_path = tmp_path / "wallet.json.key"

    first = resolve_device_key("", key_path)
    second = resolve_device_key("", key_path)

    assert first == second and len(first) == 32
    assert stat.S_IMODE(key_path.stat().st_mode) == 0o600


def test_configured_device_key_wins(tmp_path):
    configured = base64.urlsafe_b64encode(b"\x09" * 32).decode().rstrip("=")

    assert resolve_device_key(configured, tmp_path / "unused.key") == b"\x09" * 32
    assert not (tmp_path / "unused.key").exists()


def test_bad_device_key_length():
    with pytest.raises(WalletStorageError):
        decode_device_key(base64.urlsafe_b64encode(b"short").decode())
