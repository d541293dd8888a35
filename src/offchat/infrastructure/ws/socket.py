from __future__ import annotations

from fastapi import WebSocket
from starlette.websockets import WebSocketState


class FastAPIChatSocket:
    """Adapts a Starlette WebSocket to the ChatSocket port."""

    def __init__(self, websocket: WebSocket) -> None:
        self._ws = websocket

    @property
    def is_open(self) -> bool:
        return (
            self._ws.client_state == WebSocketState.CONNECTED
            and self._ws.application_state == WebSocketState.CONNECTED
        )

    async def send_text(self, data: str) -> None:
        await self._ws.send_text(data)
