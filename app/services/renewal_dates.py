"""Renewal date arithmetic for subscriptions."""

import calendar as cal
from datetime import datetime

from app.models.shared import as_utc
from app.models.subscription import BillingCycle, Subscription, SubscriptionStatus


def add_months(dt: datetime, months: int) -> datetime:
    """Add months to a datetime, clamping to last day of month."""
    month = dt.month - 1 + months
    year = dt.year + month // 12
    month = month % 12 + 1
    max_day = cal.monthrange(year, month)[1]
    day = min(dt.day, max_day)
    return dt.replace(year=year, month=month, day=day)


def advance_renewal_date(current: datetime, billing_cycle: str) -> datetime:
    """Move a renewal date forward by exactly one billing cycle.

    The anchor is the subscription's current renewal date, never the time of
    processing, so an overdue subscription catches up one cycle at a time.

    Args:
        current: The renewal date that has just been charged.
        billing_cycle: ``Monthly`` or ``Yearly``.

    Returns:
        The next renewal date.
    """
    if billing_cycle == BillingCycle.MONTHLY.value:
        return add_months(current, 1)
    elif billing_cycle == BillingCycle.YEARLY.value:
        return add_months(current, 12)
    raise ValueError(f"Unknown billing cycle: {billing_cycle}")


def is_due(subscription: Subscription, now: datetime) -> bool:
    """Check whether an active subscription's renewal date has been reached."""
    if subscription.status != SubscriptionStatus.ACTIVE.value:
        return False
    return as_utc(subscription.next_renewal_date) <= as_utc(now)  # type: ignore[arg-type]
