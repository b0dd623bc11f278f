"""Outgoing email.

Messages go out over SMTP when ``SMTP_HOST``, ``SMTP_PORT`` and ``SMTP_FROM``
are all set. Otherwise the message is written to the log instead, which keeps
the password-reset flow usable in development.
"""

import logging
import smtplib
from email.message import EmailMessage

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailService:
    """Sends plain-text email through SMTP, or logs it when SMTP is not configured."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    @property
    def configured(self) -> bool:
        return self._settings.smtp_configured

    def _build_message(self, to: str, subject: str, text: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._settings.smtp_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)
        return message

    def send(self, to: str, subject: str, text: str) -> bool:
        """
        Send an email.

        Returns:
            True if handed to the SMTP server, False if only logged
        """
        if not self.configured:
            logger.info(f"[mail] SMTP not configured. Would send to: {to}")
            logger.info(f"[mail] Subject: {subject}")
            logger.info(text)
            return False

        settings = self._settings
        message = self._build_message(to, subject, text)
        # Port 465 is implicit TLS even when SMTP_SECURE is not set
        use_ssl = settings.smtp_secure or settings.smtp_port == 465
        smtp_class = smtplib.SMTP_SSL if use_ssl else smtplib.SMTP

        with smtp_class(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
            if settings.smtp_user and settings.smtp_pass:
                smtp.login(settings.smtp_user, settings.smtp_pass)
            smtp.send_message(message)

        logger.info(f"Sent email '{subject}' to {to}")
        return True


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """Get or create the email service singleton."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
