import logging
from typing import Any

from arq import cron

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.email_service import EmailService
from app.services.event_publisher import RedisEventPublisher
from app.services.reminder_service import RenewalReminderService
from app.services.renewal_scheduler import RenewalScheduler
from app.tasks import redis_settings

logger = logging.getLogger(__name__)


def sweep_cron_fields(interval_minutes: int) -> dict[str, set[int]]:
    """Translate a sweep interval into arq cron fields.

    The interval has to divide an hour (1, 2, ..., 30, 60) or a day
    (120, 180, ..., 1440) evenly so every run is the same distance apart.
    """
    if interval_minutes <= 0:
        raise ValueError("Sweep interval must be positive")
    if interval_minutes < 60 and 60 % interval_minutes == 0:
        return {"minute": set(range(0, 60, interval_minutes))}
    if interval_minutes % 60 == 0 and 1440 % interval_minutes == 0:
        return {"hour": set(range(0, 24, interval_minutes // 60)), "minute": {0}}
    raise ValueError(
        f"Sweep interval of {interval_minutes} minutes does not divide an hour or a day evenly"
    )


async def startup(ctx: dict[str, Any]) -> None:
    """Build the worker's publisher and background services over its Redis pool."""
    publisher = RedisEventPublisher(
        ctx["redis"],
        channel=settings.EVENTS_CHANNEL,
        timeout=settings.RENEWAL_ITEM_TIMEOUT_SECONDS,
    )
    ctx["publisher"] = publisher
    ctx["renewal_scheduler"] = RenewalScheduler(
        SessionLocal,
        publisher,
        item_timeout=settings.RENEWAL_ITEM_TIMEOUT_SECONDS,
    )
    ctx["reminder_service"] = RenewalReminderService(
        SessionLocal,
        publisher,
        EmailService(),
        lookahead_days=settings.REMINDER_LOOKAHEAD_DAYS,
        timeout=settings.RENEWAL_ITEM_TIMEOUT_SECONDS,
    )
    logger.info(
        "Worker ready: renewal sweep every %d minutes, reminders daily at %02d:00 UTC",
        settings.RENEWAL_SWEEP_INTERVAL_MINUTES,
        settings.REMINDER_HOUR,
    )


async def process_renewals_task(ctx: dict[str, Any]) -> int:
    """Background task: renew every active subscription that has come due.

    Runs at the configured sweep interval.
    """
    scheduler: RenewalScheduler = ctx["renewal_scheduler"]
    result = await scheduler.run_sweep()
    if result.failed > 0:
        logger.warning("%d subscriptions failed to renew and stay due", result.failed)
    return result.processed


async def send_renewal_reminders_task(ctx: dict[str, Any]) -> int:
    """Background task: remind owners of subscriptions renewing soon.

    Runs daily.
    """
    service: RenewalReminderService = ctx["reminder_service"]
    result = await service.run()
    return result.sent


class WorkerSettings:
    functions = [
        process_renewals_task,
        send_renewal_reminders_task,
    ]
    cron_jobs = [
        cron(
            process_renewals_task,
            **sweep_cron_fields(settings.RENEWAL_SWEEP_INTERVAL_MINUTES),  # type: ignore[arg-type]
        ),
        cron(send_renewal_reminders_task, hour={settings.REMINDER_HOUR}, minute={0}),  # daily
    ]
    on_startup = startup
    redis_settings = redis_settings
