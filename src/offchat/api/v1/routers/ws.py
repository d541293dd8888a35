from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as FrameValidationError

from offchat.application.dto.message import NewMessage
from offchat.config import settings
from offchat.domain.value_objects.enums import MessageType
from offchat.infrastructure.ws.protocol import (
    ErrorFrame,
    JoinFrame,
    JoinGlobalFrame,
    SendMessageFrame,
    TypingFrame,
    parse_inbound,
)
from offchat.infrastructure.ws.socket import FastAPIChatSocket
from offchat.services.message_service import IngestOutcome, MessageIngestPipeline
from offchat.services.presence_service import PresenceTracker

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

INVALID_FORMAT = "Invalid message format"


@dataclass(slots=True)
class _SocketSession:
    socket: FastAPIChatSocket
    user_id: str | None = None
    chat_id: str | None = None


@router.websocket(settings.WS_PATH)
async def ws_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    presence: PresenceTracker = websocket.app.state.presence
    pipeline: MessageIngestPipeline = websocket.app.state.pipeline
    session = _SocketSession(socket=FastAPIChatSocket(websocket))
    logger.debug("New WebSocket connection")

    try:
        await _read_loop(websocket, session, presence, pipeline)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", session.user_id)
    finally:
        if session.user_id is not None:
            try:
                await presence.leave(session.user_id, session.socket, session.chat_id)
            except Exception:
                logger.exception("Failed to mark %s offline", session.user_id)


async def _read_loop(
    ws: WebSocket,
    session: _SocketSession,
    presence: PresenceTracker,
    pipeline: MessageIngestPipeline,
) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            frame = parse_inbound(raw)
        except FrameValidationError:
            await session.socket.send_text(ErrorFrame(message=INVALID_FORMAT).to_json())
            continue

        try:
            if isinstance(frame, JoinFrame):
                session.user_id = frame.user_id
                session.chat_id = frame.chat_id
                await presence.join(frame.user_id, session.socket, frame.chat_id)
            elif isinstance(frame, JoinGlobalFrame):
                session.user_id = frame.user_id
                session.chat_id = None
                await presence.join_global(frame.user_id, session.socket)
            elif isinstance(frame, SendMessageFrame):
                await _handle_send(session, pipeline, frame)
            elif isinstance(frame, TypingFrame):
                await pipeline.relay_typing(frame.chat_id, frame.user_id, frame.is_typing)
        except Exception:
            # One bad event must not take the connection down.
            logger.exception("WebSocket message error (%s)", frame.type)


async def _handle_send(
    session: _SocketSession,
    pipeline: MessageIngestPipeline,
    frame: SendMessageFrame,
) -> None:
    result = await pipeline.ingest(
        NewMessage(
            chat_id=frame.chat_id,
            sender_id=frame.sender_id,
            content=frame.content,
            message_type=frame.message_type or MessageType.TEXT,
            transaction_hash=frame.transaction_hash,
            amount=frame.amount,
            token_symbol=frame.token_symbol,
            nft_id=frame.nft_id,
        )
    )
    if result.outcome is IngestOutcome.REJECTED and result.error:
        await session.socket.send_text(ErrorFrame(message=result.error).to_json())
