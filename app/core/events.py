"""FastAPI dependencies for the API process's event publisher.

The publisher is built once in ``app.main`` and kept on ``app.state``.
"""

from fastapi import Request, WebSocket

from app.services.event_publisher import ConnectionManager


def get_publisher(request: Request) -> ConnectionManager:
    return request.app.state.publisher  # type: ignore[no-any-return]


def get_websocket_publisher(websocket: WebSocket) -> ConnectionManager:
    return websocket.app.state.publisher  # type: ignore[no-any-return]
