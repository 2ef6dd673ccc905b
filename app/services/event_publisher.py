"""Real-time event publication to connected web clients.

Events are delivered either to every connected client (broadcast) or to the
room of a single owner. Publishing is best-effort: failures are logged and
reported through ``PublishResult``, never raised, so a lost notification can
not undo a state change that has already been committed.

Two publishers exist:

* ``ConnectionManager`` lives in the API process and writes directly to the
  websocket connections it holds.
* ``RedisEventPublisher`` lives in the worker process, which has no client
  connections; it pushes events onto a Redis channel that ``relay_events``
  forwards to the API process's ``ConnectionManager``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from app.core.config import settings
from app.schemas.events import NotificationEvent, PaymentProcessedEvent
from app.schemas.subscription import SubscriptionResponse

if TYPE_CHECKING:
    from fastapi import WebSocket
    from redis.asyncio import Redis

    from app.models.subscription import Subscription

logger = logging.getLogger(__name__)

# Event names understood by the web client
PAYMENT_PROCESSED = "payment_processed"
SUBSCRIPTION_ADDED = "subscription_added"
SUBSCRIPTION_UPDATED = "subscription_updated"
SUBSCRIPTION_DELETED = "subscription_deleted"
NOTIFICATION = "notification"


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a single publish call."""

    ok: bool
    error: str | None = None


def payment_processed_payload(
    subscription_name: str,
    amount: Decimal | float,
    date: datetime,
    user_id: UUID,
) -> dict[str, Any]:
    return PaymentProcessedEvent(
        subscription=subscription_name,
        amount=float(amount),
        date=date,
        user=user_id,
    ).model_dump(mode="json")


def subscription_payload(subscription: Subscription) -> dict[str, Any]:
    """Serialize a subscription the way the API returns it."""
    return SubscriptionResponse.model_validate(subscription).model_dump(
        mode="json", by_alias=True
    )


def notification_payload(title: str, message: str) -> dict[str, Any]:
    return NotificationEvent(title=title, message=message).model_dump(mode="json")


class EventPublisher(ABC):
    """Best-effort event publisher.

    Args:
        timeout: Seconds allowed for a single delivery. ``None`` waits forever.
    """

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout

    async def publish(self, event: str, payload: Any) -> PublishResult:
        """Send an event to every connected client."""
        return await self._deliver(None, event, payload)

    async def publish_to_owner(self, owner_id: UUID, event: str, payload: Any) -> PublishResult:
        """Send an event only to the clients of one owner."""
        return await self._deliver(str(owner_id), event, payload)

    async def _deliver(self, room: str | None, event: str, payload: Any) -> PublishResult:
        try:
            await asyncio.wait_for(self._send(room, event, payload), timeout=self.timeout)
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            logger.warning("Failed to publish %s event (room=%s): %s", event, room, reason)
            return PublishResult(ok=False, error=reason)
        return PublishResult(ok=True)

    @abstractmethod
    async def _send(self, room: str | None, event: str, payload: Any) -> None:
        """Deliver one event; ``room`` is ``None`` for a broadcast."""


class ConnectionManager(EventPublisher):
    """Registry of open websocket connections, grouped into per-owner rooms."""

    def __init__(self, timeout: float | None = None):
        super().__init__(timeout)
        self._connections: set[WebSocket] = set()
        self._rooms: dict[str, set[WebSocket]] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket, owner_id: UUID) -> None:
        self._connections.add(websocket)
        self._rooms.setdefault(str(owner_id), set()).add(websocket)
        # A client that sees the accept is already in its room
        try:
            await websocket.accept()
        except BaseException:
            self.disconnect(websocket)
            raise
        logger.info("Client connected for user %s (%d open)", owner_id, len(self._connections))

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        for room, members in list(self._rooms.items()):
            members.discard(websocket)
            if not members:
                del self._rooms[room]

    async def deliver(self, room: str | None, event: str, payload: Any) -> PublishResult:
        """Deliver an event that arrived from another process."""
        return await self._deliver(room, event, payload)

    async def _send(self, room: str | None, event: str, payload: Any) -> None:
        if room is None:
            targets = list(self._connections)
        else:
            targets = list(self._rooms.get(room, ()))
        message = {"event": event, "data": payload}
        for websocket in targets:
            try:
                await websocket.send_json(message)
            except Exception:
                logger.warning("Dropping unreachable websocket while sending %s", event)
                self.disconnect(websocket)


class RedisEventPublisher(EventPublisher):
    """Publishes events onto a Redis pub/sub channel."""

    def __init__(
        self,
        redis: Redis,
        channel: str | None = None,
        timeout: float | None = None,
    ):
        super().__init__(timeout)
        self.redis = redis
        self.channel = channel or settings.EVENTS_CHANNEL

    async def _send(self, room: str | None, event: str, payload: Any) -> None:
        message = json.dumps({"room": room, "event": event, "data": payload})
        await self.redis.publish(self.channel, message)


async def relay_events(redis: Redis, manager: ConnectionManager, channel: str) -> None:
    """Forward events published on ``channel`` to local websocket clients.

    Runs until cancelled.
    """
    pubsub = redis.pubsub()
    await pubsub.subscribe(channel)
    logger.info("Relaying events from Redis channel %s", channel)
    try:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue
            try:
                envelope = json.loads(message["data"])
                event = envelope["event"]
            except (TypeError, ValueError, KeyError):
                logger.warning("Ignoring malformed message on %s", channel)
                continue
            await manager.deliver(envelope.get("room"), event, envelope.get("data"))
    finally:
        await pubsub.unsubscribe(channel)
        await pubsub.aclose()
