from app.schemas.analytics import AnalyticsResponse, CategoryTotal, StatusCount
from app.schemas.events import NotificationEvent, PaymentProcessedEvent
from app.schemas.payment import PaymentResponse
from app.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionResponse,
    SubscriptionUpdate,
)
from app.schemas.user import MessageResponse, UserCreate, UserResponse, UserUpdate

__all__ = [
    "AnalyticsResponse",
    "CategoryTotal",
    "MessageResponse",
    "NotificationEvent",
    "PaymentProcessedEvent",
    "PaymentResponse",
    "StatusCount",
    "SubscriptionCreate",
    "SubscriptionResponse",
    "SubscriptionUpdate",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
