"""
Unit tests for SmtpEmailSender adapter.

smtplib.SMTP is patched; no network connection is made.
"""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from src.adapters.smtp.smtp import SmtpEmailSender
from src.config.settings import Settings
from src.domain.exceptions import DeliveryError


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        smtp_host="smtp.test",
        smtp_port=2525,
        smtp_username="mailer",
        smtp_password="hunter2",
        smtp_use_tls=True,
        smtp_timeout_seconds=3.0,
        sender_email="no-reply@example.com",
        sender_name="Accounts",
    )


@pytest.fixture
def smtp_client() -> MagicMock:
    with patch("src.adapters.smtp.smtp.smtplib.SMTP") as smtp_cls:
        client = MagicMock()
        smtp_cls.return_value.__enter__.return_value = client
        client.smtp_cls = smtp_cls
        yield client


class TestSend:
    """Tests for SmtpEmailSender.send."""

    def test_connects_with_configured_host(
        self, settings: Settings, smtp_client: MagicMock
    ) -> None:
        SmtpEmailSender(settings).send("user@example.com", "Hi", "Body")
        smtp_client.smtp_cls.assert_called_once_with("smtp.test", 2525, timeout=3.0)

    def test_starttls_and_login(self, settings: Settings, smtp_client: MagicMock) -> None:
        SmtpEmailSender(settings).send("user@example.com", "Hi", "Body")
        smtp_client.starttls.assert_called_once()
        smtp_client.login.assert_called_once_with("mailer", "hunter2")

    def test_message_headers_and_body(self, settings: Settings, smtp_client: MagicMock) -> None:
        SmtpEmailSender(settings).send("user@example.com", "Verify Your Email", "Code 123456")

        message = smtp_client.send_message.call_args[0][0]
        assert message["To"] == "user@example.com"
        assert message["From"] == "Accounts <no-reply@example.com>"
        assert message["Subject"] == "Verify Your Email"
        assert "Code 123456" in message.get_content()

    def test_no_tls_no_login(self, settings: Settings, smtp_client: MagicMock) -> None:
        plain = settings.model_copy(update={"smtp_use_tls": False, "smtp_username": ""})
        SmtpEmailSender(plain).send("user@example.com", "Hi", "Body")

        smtp_client.starttls.assert_not_called()
        smtp_client.login.assert_not_called()
        smtp_client.send_message.assert_called_once()

    def test_smtp_error_raises_delivery_error(
        self, settings: Settings, smtp_client: MagicMock
    ) -> None:
        smtp_client.send_message.side_effect = smtplib.SMTPRecipientsRefused({})

        with pytest.raises(DeliveryError) as exc_info:
            SmtpEmailSender(settings).send("user@example.com", "Hi", "Body")
        assert isinstance(exc_info.value.__cause__, smtplib.SMTPException)

    def test_connection_error_raises_delivery_error(
        self, settings: Settings, smtp_client: MagicMock
    ) -> None:
        smtp_client.smtp_cls.side_effect = ConnectionRefusedError()

        with pytest.raises(DeliveryError):
            SmtpEmailSender(settings).send("user@example.com", "Hi", "Body")
