"""Daily reminders for subscriptions that renew soon.

Reminders only read: they never touch renewal dates or payments. Each
reminder is an email to the owner plus a ``notification`` event sent to the
owner's room only. Nothing records that a reminder went out, so a
subscription that stays inside the lookahead window is reminded on every run.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from app.models.shared import as_utc, utc_now
from app.repositories.subscription_repository import SubscriptionRepository
from app.repositories.user_repository import UserRepository
from app.services.email_service import EmailService, _format_amount, _format_date
from app.services.event_publisher import NOTIFICATION, EventPublisher, notification_payload
from app.services.renewal_scheduler import SchedulerConfigurationError

if TYPE_CHECKING:
    from app.core.database import SessionFactory
    from app.models.subscription import Subscription
    from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class ReminderResult:
    sent: int = 0
    failed: int = 0


class RenewalReminderService:
    def __init__(
        self,
        session_factory: SessionFactory,
        publisher: EventPublisher | None,
        email_service: EmailService | None = None,
        lookahead_days: int = 3,
        timeout: float | None = None,
    ):
        if publisher is None:
            raise SchedulerConfigurationError(
                "RenewalReminderService requires an event publisher"
            )
        self.session_factory = session_factory
        self.publisher = publisher
        self.email_service = email_service or EmailService()
        self.lookahead = timedelta(days=lookahead_days)
        self.timeout = timeout

    async def run(self, now: datetime | None = None) -> ReminderResult:
        """Remind owners of every active subscription renewing within the lookahead window."""
        now = as_utc(now) if now is not None else utc_now()
        result = ReminderResult()

        upcoming = await asyncio.to_thread(self._list_upcoming, now)
        logger.info("Found %d subscriptions renewing before %s", len(upcoming), now + self.lookahead)

        for subscription, user in upcoming:
            try:
                sent = await asyncio.wait_for(
                    self.email_service.send_renewal_reminder_email(subscription, user),
                    timeout=self.timeout,
                )
            except Exception:
                sent = False
                logger.exception("Failed to send reminder email for subscription %s", subscription.id)

            if sent:
                result.sent += 1
            else:
                result.failed += 1

            await self.publisher.publish_to_owner(
                user.id,  # type: ignore[arg-type]
                NOTIFICATION,
                notification_payload(
                    title="Upcoming renewal",
                    message=(
                        f"{subscription.name} renews on "
                        f"{_format_date(as_utc(subscription.next_renewal_date))} "  # type: ignore[arg-type]
                        f"for {_format_amount(subscription.amount)} {subscription.currency}."
                    ),
                ),
            )

        logger.info("Renewal reminders: %d sent, %d failed", result.sent, result.failed)
        return result

    def _list_upcoming(self, now: datetime) -> list[tuple[Subscription, User]]:
        db = self.session_factory()
        try:
            users = UserRepository(db)
            pairs = []
            for subscription in SubscriptionRepository(db).find_upcoming(now, now + self.lookahead):
                user = users.get_by_id(subscription.user_id)  # type: ignore[arg-type]
                if user is None:
                    logger.warning("Subscription %s has no owner, skipping", subscription.id)
                    continue
                pairs.append((subscription, user))
            return pairs
        finally:
            db.close()
