"""Payment schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.payment import PaymentStatus
from app.models.shared import as_utc


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: UUID = Field(serialization_alias="_id")
    user_id: UUID = Field(serialization_alias="user")
    subscription_id: UUID | None = Field(serialization_alias="subscription")
    amount: float
    currency: str
    date: datetime
    status: PaymentStatus
    created_at: datetime | None = None

    @field_validator("date", "created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None
