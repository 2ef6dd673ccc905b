from app.models.payment import Payment, PaymentStatus
from app.models.subscription import BillingCycle, Subscription, SubscriptionStatus
from app.models.user import User

__all__ = [
    "BillingCycle",
    "Payment",
    "PaymentStatus",
    "Subscription",
    "SubscriptionStatus",
    "User",
]
