from app.repositories.analytics_repository import AnalyticsRepository
from app.repositories.payment_repository import PaymentRepository
from app.repositories.subscription_repository import SubscriptionRepository
from app.repositories.user_repository import UserRepository

__all__ = [
    "AnalyticsRepository",
    "PaymentRepository",
    "SubscriptionRepository",
    "UserRepository",
]
