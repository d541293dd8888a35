from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol


class ChatSocket(Protocol):
    """The part of a WebSocket the broadcast layer relies on."""

    @property
    def is_open(self) -> bool: ...

    async def send_text(self, data: str) -> None: ...


@dataclass(slots=True)
class Connection:
    user_id: str
    socket: ChatSocket
    chat_id: str | None = None
    is_global: bool = False


class ConnectionRegistry(Protocol):
    """user id -> live connection; at most one tracked socket per user."""

    def get(self, user_id: str) -> Connection | None: ...

    def set(self, user_id: str, connection: Connection) -> None: ...

    def delete(self, user_id: str) -> None: ...

    def __iter__(self) -> Iterator[Connection]: ...

    def __len__(self) -> int: ...
