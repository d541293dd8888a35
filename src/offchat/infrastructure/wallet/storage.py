"""KeyValueStore implementations."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from offchat.application.exceptions import WalletStorageError

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileKeyValueStore:
    """Slots persisted as one JSON object; every write replaces the file atomically."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._items = self._load()

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise WalletStorageError(f"Cannot read wallet storage at {self._path}") from exc
        if not isinstance(data, dict):
            raise WalletStorageError(f"Wallet storage at {self._path} is not a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(self._items, f)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp, 0o600)
            os.replace(tmp, self._path)
        except OSError as exc:
            raise WalletStorageError(f"Cannot write wallet storage at {self._path}") from exc
        logger.debug("Wallet storage flushed to %s", self._path)
