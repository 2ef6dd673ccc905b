from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.sorting import SUBSCRIPTION_SORT_FIELDS, apply_order_by
from app.models.payment import Payment
from app.models.subscription import Subscription, SubscriptionStatus
from app.schemas.subscription import SubscriptionCreate, SubscriptionUpdate


class SubscriptionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 100,
        status: SubscriptionStatus | None = None,
        category: str | None = None,
        order_by: str | None = None,
    ) -> list[Subscription]:
        query = self.db.query(Subscription).filter(Subscription.user_id == user_id)
        if status is not None:
            query = query.filter(Subscription.status == status.value)
        if category is not None:
            query = query.filter(Subscription.category == category)
        query = apply_order_by(query, Subscription, order_by, SUBSCRIPTION_SORT_FIELDS)
        return query.offset(skip).limit(limit).all()

    def count(self, user_id: UUID) -> int:
        return self.db.query(Subscription).filter(Subscription.user_id == user_id).count()

    def get_by_id(self, subscription_id: UUID, user_id: UUID | None = None) -> Subscription | None:
        query = self.db.query(Subscription).filter(Subscription.id == subscription_id)
        if user_id is not None:
            query = query.filter(Subscription.user_id == user_id)
        return query.first()

    def find_due(self, now: datetime) -> list[Subscription]:
        """Active subscriptions whose next renewal date is on or before ``now``."""
        return (
            self.db.query(Subscription)
            .filter(
                Subscription.status == SubscriptionStatus.ACTIVE.value,
                Subscription.next_renewal_date <= now,
            )
            .all()
        )

    def find_upcoming(self, start: datetime, end: datetime) -> list[Subscription]:
        """Active subscriptions renewing within ``[start, end]``."""
        return (
            self.db.query(Subscription)
            .filter(
                Subscription.status == SubscriptionStatus.ACTIVE.value,
                Subscription.next_renewal_date >= start,
                Subscription.next_renewal_date <= end,
            )
            .order_by(Subscription.next_renewal_date.asc())
            .all()
        )

    def create(self, data: SubscriptionCreate, user_id: UUID) -> Subscription:
        subscription = Subscription(
            user_id=user_id,
            name=data.name,
            category=data.category,
            amount=data.amount,
            billing_cycle=data.billing_cycle.value,
            next_renewal_date=data.next_renewal_date,
            status=data.status.value,
            payment_method=data.payment_method,
            currency=(data.currency or settings.DEFAULT_CURRENCY).upper(),
            logo=data.logo,
        )
        self.db.add(subscription)
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def update(
        self, subscription_id: UUID, data: SubscriptionUpdate, user_id: UUID | None = None
    ) -> Subscription | None:
        subscription = self.get_by_id(subscription_id, user_id)
        if not subscription:
            return None
        # Omitted and null fields keep their current value
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        for key in ("billing_cycle", "status"):
            if key in update_data:
                update_data[key] = update_data[key].value
        if "currency" in update_data:
            update_data["currency"] = update_data["currency"].upper()
        for key, value in update_data.items():
            setattr(subscription, key, value)
        return self.save(subscription)

    def save(self, subscription: Subscription) -> Subscription:
        self.db.add(subscription)
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def delete(self, subscription_id: UUID, user_id: UUID | None = None) -> bool:
        subscription = self.get_by_id(subscription_id, user_id)
        if not subscription:
            return False
        # Payment history outlives the subscription it was charged for
        self.db.query(Payment).filter(Payment.subscription_id == subscription.id).update(
            {Payment.subscription_id: None}, synchronize_session=False
        )
        self.db.delete(subscription)
        self.db.commit()
        return True
