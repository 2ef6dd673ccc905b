"""Payloads carried by real-time events."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class PaymentProcessedEvent(BaseModel):
    subscription: str
    amount: float
    date: datetime
    user: UUID


class NotificationEvent(BaseModel):
    title: str
    message: str
