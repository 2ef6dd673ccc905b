import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from redis.asyncio import Redis

from app.core.config import settings
from app.routers import analytics, payments, realtime, subscriptions, users
from app.services.event_publisher import ConnectionManager, relay_events

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Subscriptions", "description": "Track recurring subscriptions."},
    {"name": "Payments", "description": "Payment history recorded by renewals."},
    {"name": "Analytics", "description": "Spending totals and breakdowns."},
    {"name": "Users", "description": "Profile management and account deletion."},
    {"name": "Realtime", "description": "Websocket stream of subscription and payment events."},
]


async def _run_relay(manager: ConnectionManager) -> None:
    """Keep worker events flowing to websocket clients, reconnecting to Redis when needed."""
    delay = settings.EVENTS_RELAY_RETRY_SECONDS
    while True:
        redis = Redis.from_url(settings.REDIS_URL)
        try:
            await relay_events(redis, manager, settings.EVENTS_CHANNEL)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Event relay lost Redis, reconnecting in %.1f seconds", delay)
        else:
            logger.warning("Event relay subscription ended, reconnecting in %.1f seconds", delay)
        finally:
            await redis.aclose()
        await asyncio.sleep(delay)
        delay = min(delay * 2, settings.EVENTS_RELAY_MAX_RETRY_SECONDS)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    relay_task = None
    if settings.EVENTS_RELAY_ENABLED:
        relay_task = asyncio.create_task(_run_relay(app.state.publisher))
    yield
    if relay_task is not None:
        relay_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await relay_task


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Subscription expense tracker API. Manage subscriptions, browse payment "
        "history and analytics, and receive renewal events over a websocket."
    ),
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.state.publisher = ConnectionManager(timeout=settings.RENEWAL_ITEM_TIMEOUT_SECONDS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

app.include_router(subscriptions.router, prefix="/api/subscriptions", tags=["Subscriptions"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(realtime.router, tags=["Realtime"])


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return "Spendora API is running"
