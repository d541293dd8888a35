from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """String slots with browser local-storage semantics."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...
