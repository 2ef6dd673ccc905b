"""Subscription schemas.

Field names on the wire are camelCase, with ``_id`` for the id and ``user``
for the owner, so the web client reads API responses and real-time events
the same way.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.shared import as_utc
from app.models.subscription import BillingCycle, SubscriptionStatus


class SubscriptionCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0)
    billing_cycle: BillingCycle
    next_renewal_date: datetime
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    payment_method: str | None = Field(default=None, max_length=100)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    logo: str | None = Field(default=None, max_length=1000)

    @field_validator("next_renewal_date")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class SubscriptionUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    amount: Decimal | None = Field(default=None, gt=0)
    billing_cycle: BillingCycle | None = None
    next_renewal_date: datetime | None = None
    status: SubscriptionStatus | None = None
    payment_method: str | None = Field(default=None, max_length=100)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    logo: str | None = Field(default=None, max_length=1000)

    @field_validator("next_renewal_date")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: UUID = Field(serialization_alias="_id")
    user_id: UUID = Field(serialization_alias="user")
    name: str
    category: str
    amount: float
    billing_cycle: BillingCycle
    next_renewal_date: datetime
    status: SubscriptionStatus
    payment_method: str | None = None
    currency: str
    logo: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("next_renewal_date", "created_at", "updated_at")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None
