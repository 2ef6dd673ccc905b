"""Tests for EmailService – reminder composition, SMTP sending, and no-op behavior."""

from datetime import UTC, datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from app.services.email_service import EmailService, _format_amount, _format_date

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_user(**overrides):  # type: ignore[no-untyped-def]
    defaults = {"id": "user-001", "name": "Ada Lovelace", "email": "ada@example.com"}
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _make_subscription(**overrides):  # type: ignore[no-untyped-def]
    defaults = {
        "id": "sub-001",
        "name": "Netflix",
        "amount": Decimal("649.0000"),
        "currency": "INR",
        "billing_cycle": "Monthly",
        "next_renewal_date": datetime(2024, 1, 17, tzinfo=UTC),
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _smtp_settings(**overrides):  # type: ignore[no-untyped-def]
    defaults = {
        "SMTP_HOST": "smtp.example.com",
        "SMTP_PORT": 587,
        "SMTP_USERNAME": "mailer",
        "SMTP_PASSWORD": "secret",
        "SMTP_FROM_EMAIL": "noreply@spendora.app",
        "SMTP_FROM_NAME": "Spendora",
        "SMTP_USE_TLS": True,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


# ---------------------------------------------------------------------------
# Tests for helper functions
# ---------------------------------------------------------------------------


class TestFormatAmount:
    def test_none_returns_zero(self) -> None:
        assert _format_amount(None) == "0.00"

    def test_decimal(self) -> None:
        assert _format_amount(Decimal("123.4567")) == "123.46"

    def test_int(self) -> None:
        assert _format_amount(649) == "649.00"


class TestFormatDate:
    def test_none_returns_empty(self) -> None:
        assert _format_date(None) == ""

    def test_datetime(self) -> None:
        assert _format_date(datetime(2024, 1, 17, 10, 30, tzinfo=UTC)) == "2024-01-17"


# ---------------------------------------------------------------------------
# Tests for send_email
# ---------------------------------------------------------------------------


class TestSendEmail:
    @pytest.mark.asyncio
    async def test_noop_without_smtp_host(self) -> None:
        with (
            patch("app.services.email_service.settings", _smtp_settings(SMTP_HOST="")),
            patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send,
        ):
            result = await EmailService().send_email("ada@example.com", "Hi", "<p>Hi</p>")

        assert result is True
        mock_send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sends_via_smtp(self) -> None:
        with (
            patch("app.services.email_service.settings", _smtp_settings()),
            patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send,
        ):
            result = await EmailService().send_email("ada@example.com", "Hi", "<p>Hi</p>")

        assert result is True
        mock_send.assert_awaited_once()
        msg = mock_send.await_args.args[0]
        assert msg["To"] == "ada@example.com"
        assert msg["Subject"] == "Hi"
        assert msg["From"] == "Spendora <noreply@spendora.app>"
        kwargs = mock_send.await_args.kwargs
        assert kwargs["hostname"] == "smtp.example.com"
        assert kwargs["port"] == 587
        assert kwargs["username"] == "mailer"
        assert kwargs["start_tls"] is True

    @pytest.mark.asyncio
    async def test_empty_credentials_are_omitted(self) -> None:
        with (
            patch(
                "app.services.email_service.settings",
                _smtp_settings(SMTP_USERNAME="", SMTP_PASSWORD=""),
            ),
            patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send,
        ):
            await EmailService().send_email("ada@example.com", "Hi", "<p>Hi</p>")

        assert mock_send.await_args.kwargs["username"] is None
        assert mock_send.await_args.kwargs["password"] is None

    @pytest.mark.asyncio
    async def test_smtp_error_propagates(self) -> None:
        with (
            patch("app.services.email_service.settings", _smtp_settings()),
            patch("aiosmtplib.send", new_callable=AsyncMock, side_effect=OSError("refused")),
        ):
            with pytest.raises(OSError, match="refused"):
                await EmailService().send_email("ada@example.com", "Hi", "<p>Hi</p>")


# ---------------------------------------------------------------------------
# Tests for send_renewal_reminder_email
# ---------------------------------------------------------------------------


class TestSendRenewalReminderEmail:
    @pytest.mark.asyncio
    async def test_composes_reminder(self) -> None:
        service = EmailService()
        with patch.object(service, "send_email", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = True
            result = await service.send_renewal_reminder_email(
                _make_subscription(), _make_user()  # type: ignore[arg-type]
            )

        assert result is True
        kwargs = mock_send.await_args.kwargs
        assert kwargs["to"] == "ada@example.com"
        assert kwargs["subject"] == "Netflix renews on 2024-01-17"
        assert "Hi Ada Lovelace" in kwargs["html_body"]
        assert "649.00 INR" in kwargs["html_body"]
        assert "Monthly" in kwargs["html_body"]

    @pytest.mark.asyncio
    async def test_user_without_email(self) -> None:
        service = EmailService()
        with patch.object(service, "send_email", new_callable=AsyncMock) as mock_send:
            result = await service.send_renewal_reminder_email(
                _make_subscription(), _make_user(email=None)  # type: ignore[arg-type]
            )

        assert result is False
        mock_send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_without_name(self) -> None:
        service = EmailService()
        with patch.object(service, "send_email", new_callable=AsyncMock) as mock_send:
            await service.send_renewal_reminder_email(
                _make_subscription(), _make_user(name=None)  # type: ignore[arg-type]
            )

        assert "Hi there" in mock_send.await_args.kwargs["html_body"]
