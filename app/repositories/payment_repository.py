"""Payment repository for data access."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.payment import Payment, PaymentStatus


class PaymentRepository:
    """Repository for Payment model.

    Payments are append-only: there is no update or delete here.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 100,
        subscription_id: UUID | None = None,
    ) -> list[Payment]:
        """Get a user's payments, newest first."""
        query = self.db.query(Payment).filter(Payment.user_id == user_id)
        if subscription_id:
            query = query.filter(Payment.subscription_id == subscription_id)
        return query.order_by(Payment.date.desc()).offset(skip).limit(limit).all()

    def get_by_id(self, payment_id: UUID, user_id: UUID | None = None) -> Payment | None:
        """Get a payment by ID."""
        query = self.db.query(Payment).filter(Payment.id == payment_id)
        if user_id is not None:
            query = query.filter(Payment.user_id == user_id)
        return query.first()

    def get_by_subscription_id(self, subscription_id: UUID) -> list[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.subscription_id == subscription_id)
            .order_by(Payment.date.asc())
            .all()
        )

    def create(
        self,
        user_id: UUID,
        subscription_id: UUID,
        amount: Decimal,
        currency: str,
        date: datetime,
        status: PaymentStatus = PaymentStatus.COMPLETED,
        commit: bool = True,
    ) -> Payment:
        """Create a new payment.

        With ``commit=False`` the row is only flushed, so the caller can commit
        it together with other changes.
        """
        payment = Payment(
            user_id=user_id,
            subscription_id=subscription_id,
            amount=amount,
            currency=currency,
            date=date,
            status=status.value,
        )
        self.db.add(payment)
        if commit:
            self.db.commit()
            self.db.refresh(payment)
        else:
            self.db.flush()
        return payment
