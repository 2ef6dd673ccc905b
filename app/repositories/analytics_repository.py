from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import case
from sqlalchemy import func as sa_func
from sqlalchemy.orm import Session

from app.models.subscription import BillingCycle, Subscription, SubscriptionStatus


@dataclass
class CategorySpend:
    category: str
    total: float
    count: int


@dataclass
class StatusTally:
    status: str
    count: int


class AnalyticsRepository:
    def __init__(self, db: Session):
        self.db = db

    def total_monthly_spend(self, user_id: UUID) -> float:
        """Monthly cost of all active subscriptions; yearly plans count as 1/12."""
        monthly_amount = case(
            (Subscription.billing_cycle == BillingCycle.MONTHLY.value, Subscription.amount),
            else_=Subscription.amount / 12,
        )
        result = (
            self.db.query(sa_func.coalesce(sa_func.sum(monthly_amount), 0))
            .filter(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVE.value,
            )
            .scalar()
            or 0
        )
        return float(result)

    def category_breakdown(self, user_id: UUID) -> list[CategorySpend]:
        rows = (
            self.db.query(
                Subscription.category,
                sa_func.sum(Subscription.amount).label("total"),
                sa_func.count(Subscription.id).label("count"),
            )
            .filter(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVE.value,
            )
            .group_by(Subscription.category)
            .order_by(Subscription.category)
            .all()
        )
        return [
            CategorySpend(category=str(row.category), total=float(row.total or 0), count=row.count)
            for row in rows
        ]

    def status_counts(self, user_id: UUID) -> list[StatusTally]:
        rows = (
            self.db.query(Subscription.status, sa_func.count(Subscription.id).label("count"))
            .filter(Subscription.user_id == user_id)
            .group_by(Subscription.status)
            .order_by(Subscription.status)
            .all()
        )
        return [StatusTally(status=str(row.status), count=row.count) for row in rows]
