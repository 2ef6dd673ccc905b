"""Websocket endpoint for real-time subscription and payment events."""

import logging

import jwt
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from app.core.auth import decode_access_token
from app.core.events import get_websocket_publisher
from app.services.event_publisher import ConnectionManager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def events_socket(
    websocket: WebSocket,
    token: str = Query(...),
    manager: ConnectionManager = Depends(get_websocket_publisher),
) -> None:
    """Stream ``{"event", "data"}`` frames to a signed-in client."""
    try:
        user_id = decode_access_token(token)
    except (jwt.InvalidTokenError, KeyError, ValueError):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(websocket, user_id)
    try:
        # Clients only listen; anything they send is ignored.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Client disconnected for user %s", user_id)
    finally:
        manager.disconnect(websocket)
