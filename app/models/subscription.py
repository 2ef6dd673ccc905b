from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid


class SubscriptionStatus(str, Enum):
    ACTIVE = "Active"
    PAUSED = "Paused"
    CANCELLED = "Cancelled"


class BillingCycle(str, Enum):
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    amount = Column(Numeric(12, 4), nullable=False)
    billing_cycle = Column(String(20), nullable=False)
    next_renewal_date = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(
        String(20), nullable=False, default=SubscriptionStatus.ACTIVE.value, index=True
    )
    payment_method = Column(String(100), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    logo = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
