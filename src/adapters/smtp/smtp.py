"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers plain-text messages through a single SMTP connection per send.
Any transport failure is raised as DeliveryError; there is no retry.
"""

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from src.config.settings import Settings
from src.domain.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Uses STARTTLS when ``smtp_use_tls`` is set and logs in only when a
    username is configured.
    """

    def __init__(self, settings: Settings) -> None:
        self._host = settings.smtp_host
        self._port = settings.smtp_port
        self._username = settings.smtp_username
        self._password = settings.smtp_password
        self._use_tls = settings.smtp_use_tls
        self._timeout = settings.smtp_timeout_seconds
        self._sender = formataddr((settings.sender_name, settings.sender_email))

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    def send(self, to: str, subject: str, body: str) -> None:
        message = self._build_message(to, subject, body)
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as client:
                if self._use_tls:
                    client.starttls()
                if self._username:
                    client.login(self._username, self._password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"SMTP delivery to {to} failed") from e
        logger.info("Email '%s' sent to %s", subject, to)
