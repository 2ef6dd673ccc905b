"""Email service for sending subscription emails via SMTP."""

from __future__ import annotations

import logging
from decimal import Decimal
from email.message import EmailMessage
from typing import TYPE_CHECKING

from app.core.config import settings

if TYPE_CHECKING:
    from app.models.subscription import Subscription
    from app.models.user import User

logger = logging.getLogger(__name__)


def _format_amount(value: object) -> str:
    """Format a monetary amount to two decimal places."""
    if value is None:
        return "0.00"
    return f"{Decimal(str(value)):.2f}"


def _format_date(dt: object) -> str:
    """Format a datetime to YYYY-MM-DD, or return empty string if None."""
    if dt is None:
        return ""
    return str(dt)[:10]


class EmailService:
    """Service for sending emails via SMTP."""

    async def send_email(self, to: str, subject: str, html_body: str) -> bool:
        """Send an email via SMTP.

        Args:
            to: Recipient email address.
            subject: Email subject line.
            html_body: HTML content of the email.

        Returns:
            True if sent successfully (or no-op when SMTP unconfigured).
        """
        if not settings.SMTP_HOST:
            logger.info("SMTP not configured, skipping email to %s: %s", to, subject)
            return True

        import aiosmtplib

        msg = EmailMessage()
        msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("Please view this email in an HTML-capable client.")
        msg.add_alternative(html_body, subtype="html")

        await aiosmtplib.send(
            msg,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME or None,
            password=settings.SMTP_PASSWORD or None,
            start_tls=settings.SMTP_USE_TLS,
        )
        logger.info("Email sent to %s: %s", to, subject)
        return True

    async def send_renewal_reminder_email(self, subscription: Subscription, user: User) -> bool:
        """Tell a user that one of their subscriptions renews soon.

        Returns:
            True if sent successfully, False when the user has no email address.
        """
        if not user.email:
            logger.warning("User %s has no email, skipping reminder email", user.id)
            return False

        renewal_date = _format_date(subscription.next_renewal_date)
        subject = f"{subscription.name} renews on {renewal_date}"

        html_body = (
            f"<h2>Upcoming renewal</h2>"
            f"<p>Hi {user.name or 'there'},</p>"
            f"<p>Your <strong>{subscription.name}</strong> subscription renews soon.</p>"
            f"<table>"
            f"<tr><td><strong>Amount:</strong></td>"
            f"<td>{_format_amount(subscription.amount)} {subscription.currency}</td></tr>"
            f"<tr><td><strong>Billing cycle:</strong></td>"
            f"<td>{subscription.billing_cycle}</td></tr>"
            f"<tr><td><strong>Renewal date:</strong></td><td>{renewal_date}</td></tr>"
            f"</table>"
            f"<p>Pause or cancel it before then if you no longer need it.</p>"
        )

        return await self.send_email(to=str(user.email), subject=subject, html_body=html_body)
