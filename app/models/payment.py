"""Payment model - append-only ledger of renewal charges."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid, utc_now


class PaymentStatus(str, Enum):
    """Payment status enum."""

    COMPLETED = "Completed"
    FAILED = "Failed"
    PENDING = "Pending"


class Payment(Base):
    """Payment model - one row per processed subscription renewal."""

    __tablename__ = "payments"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    subscription_id = Column(
        UUIDType,
        ForeignKey("subscriptions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    amount = Column(Numeric(12, 4), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    date = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    status = Column(String(20), nullable=False, default=PaymentStatus.COMPLETED.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
