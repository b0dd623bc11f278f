"""Tests for EmailService - SMTP delivery and the log fallback."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from ape_gym.services.email_service import EmailService


@pytest.fixture
def smtp_settings():
    settings = MagicMock()
    settings.smtp_configured = True
    settings.smtp_host = "smtp.example.com"
    settings.smtp_port = 587
    settings.smtp_user = "mailer"
    settings.smtp_pass = "pw"
    settings.smtp_from = "Ape Gym <no-reply@example.com>"
    settings.smtp_secure = False
    return settings


class TestLogFallback:
    def test_logs_instead_of_sending(self, caplog):
        settings = MagicMock()
        settings.smtp_configured = False
        service = EmailService(settings)

        with patch("ape_gym.services.email_service.smtplib") as smtplib_mock:
            with caplog.at_level(logging.INFO, logger="ape_gym.services.email_service"):
                sent = service.send("ana@example.com", "Hello", "Open http://x/reset-password?token=t1")

        assert sent is False
        smtplib_mock.SMTP.assert_not_called()
        assert "http://x/reset-password?token=t1" in caplog.text


class TestSmtpDelivery:
    def test_plain_smtp_with_login(self, smtp_settings):
        service = EmailService(smtp_settings)

        with patch("ape_gym.services.email_service.smtplib") as smtplib_mock:
            sent = service.send("ana@example.com", "Hello", "Body")

        assert sent is True
        smtplib_mock.SMTP.assert_called_once_with("smtp.example.com", 587, timeout=30)
        smtp = smtplib_mock.SMTP.return_value.__enter__.return_value
        smtp.login.assert_called_once_with("mailer", "pw")
        message = smtp.send_message.call_args.args[0]
        assert message["To"] == "ana@example.com"
        assert message["Subject"] == "Hello"

    def test_port_465_uses_ssl(self, smtp_settings):
        smtp_settings.smtp_port = 465
        service = EmailService(smtp_settings)

        with patch("ape_gym.services.email_service.smtplib") as smtplib_mock:
            service.send("ana@example.com", "Hello", "Body")

        smtplib_mock.SMTP_SSL.assert_called_once()
        smtplib_mock.SMTP.assert_not_called()

    def test_no_login_without_credentials(self, smtp_settings):
        smtp_settings.smtp_user = ""
        service = EmailService(smtp_settings)

        with patch("ape_gym.services.email_service.smtplib") as smtplib_mock:
            service.send("ana@example.com", "Hello", "Body")

        smtp = smtplib_mock.SMTP.return_value.__enter__.return_value
        smtp.login.assert_not_called()
