"""Renewal sweep: charge due subscriptions and move them to their next period.

A sweep lists every active subscription whose ``next_renewal_date`` has been
reached and, for each one independently:

1. records a completed payment for the subscription's amount,
2. advances ``next_renewal_date`` by one billing cycle,
3. publishes ``payment_processed`` and ``subscription_updated``.

Steps 1 and 2 are committed before anything is published. Publishing is
best-effort, so a lost event never rolls back a renewal. A failure on one
subscription is logged and counted; the rest of the sweep carries on and the
failed subscription, still due, is picked up again by the next sweep.

A subscription overdue by several cycles advances by exactly one cycle per
sweep.

Running several schedulers against the same database at once will charge
due subscriptions more than once; deploy a single worker.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from app.models.shared import as_utc, utc_now
from app.repositories.payment_repository import PaymentRepository
from app.repositories.subscription_repository import SubscriptionRepository
from app.services.event_publisher import (
    PAYMENT_PROCESSED,
    SUBSCRIPTION_UPDATED,
    EventPublisher,
    payment_processed_payload,
    subscription_payload,
)
from app.services.renewal_dates import advance_renewal_date, is_due

if TYPE_CHECKING:
    from app.core.database import SessionFactory

logger = logging.getLogger(__name__)


class SchedulerConfigurationError(ValueError):
    """Raised when a background job is constructed without a collaborator it needs."""


@dataclass
class SweepResult:
    """Counts reported by one renewal sweep."""

    processed: int = 0
    failed: int = 0
    skipped: bool = False  # another sweep was still running
    aborted: bool = False  # due subscriptions could not be listed


@dataclass
class _Renewal:
    """Snapshot of a committed renewal, taken before its session closes."""

    user_id: UUID
    name: str
    amount: Any
    next_renewal_date: datetime
    subscription: dict[str, Any]


class RenewalScheduler:
    """Runs renewal sweeps against the subscription and payment stores.

    Args:
        session_factory: Returns a new database session; each subscription is
            renewed in its own session.
        publisher: Where renewal events are sent.
        item_timeout: Seconds allowed for one subscription's store work. A
            timeout counts as a failure for that subscription. ``None``
            disables the bound. Publish calls are bounded by the publisher's
            own timeout.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        publisher: EventPublisher | None,
        item_timeout: float | None = None,
    ):
        if publisher is None:
            raise SchedulerConfigurationError("RenewalScheduler requires an event publisher")
        self.session_factory = session_factory
        self.publisher = publisher
        self.item_timeout = item_timeout
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def run_sweep(self, now: datetime | None = None) -> SweepResult:
        """Renew every subscription that is due at ``now`` (defaults to the current time)."""
        if self._running:
            logger.warning("Renewal sweep already in progress, skipping this run")
            return SweepResult(skipped=True)

        self._running = True
        try:
            return await self._sweep(as_utc(now) if now is not None else utc_now())
        finally:
            self._running = False

    async def _sweep(self, now: datetime) -> SweepResult:
        result = SweepResult()
        logger.info("Running renewal sweep at %s", now.isoformat())

        try:
            due_ids = await asyncio.to_thread(self._list_due, now)
        except Exception:
            logger.exception("Could not list due subscriptions, sweep aborted")
            result.aborted = True
            return result

        for subscription_id in due_ids:
            try:
                renewal = await asyncio.wait_for(
                    asyncio.to_thread(self._renew, subscription_id, now),
                    timeout=self.item_timeout,
                )
            except Exception:
                result.failed += 1
                logger.exception("Failed to renew subscription %s", subscription_id)
                continue

            if renewal is None:
                # Paused, cancelled or renewed since it was listed
                continue

            result.processed += 1
            logger.info(
                "Renewed %s. Next renewal: %s",
                renewal.name,
                renewal.next_renewal_date.isoformat(),
            )
            await self._notify(renewal, now)

        logger.info(
            "Renewal sweep finished: %d processed, %d failed", result.processed, result.failed
        )
        return result

    def _list_due(self, now: datetime) -> list[UUID]:
        db = self.session_factory()
        try:
            return [sub.id for sub in SubscriptionRepository(db).find_due(now)]  # type: ignore[misc]
        finally:
            db.close()

    def _renew(self, subscription_id: UUID, now: datetime) -> _Renewal | None:
        db = self.session_factory()
        try:
            subscription = SubscriptionRepository(db).get_by_id(subscription_id)
            if subscription is None or not is_due(subscription, now):
                return None

            PaymentRepository(db).create(
                user_id=subscription.user_id,  # type: ignore[arg-type]
                subscription_id=subscription.id,  # type: ignore[arg-type]
                amount=subscription.amount,  # type: ignore[arg-type]
                currency=str(subscription.currency),
                date=now,
                commit=False,
            )
            subscription.next_renewal_date = advance_renewal_date(  # type: ignore[assignment]
                as_utc(subscription.next_renewal_date),  # type: ignore[arg-type]
                str(subscription.billing_cycle),
            )
            SubscriptionRepository(db).save(subscription)

            return _Renewal(
                user_id=subscription.user_id,  # type: ignore[arg-type]
                name=str(subscription.name),
                amount=subscription.amount,
                next_renewal_date=as_utc(subscription.next_renewal_date),  # type: ignore[arg-type]
                subscription=subscription_payload(subscription),
            )
        finally:
            db.close()

    async def _notify(self, renewal: _Renewal, now: datetime) -> None:
        await self.publisher.publish(
            PAYMENT_PROCESSED,
            payment_processed_payload(renewal.name, renewal.amount, now, renewal.user_id),
        )
        await self.publisher.publish(SUBSCRIPTION_UPDATED, renewal.subscription)
