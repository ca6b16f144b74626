"""Unit tests for EmailNotifier."""

from __future__ import annotations

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from medsync.adapters.notifications.email import EmailConfig, EmailNotifier


class TestEmailNotifier:
    """Tests for EmailNotifier."""

    @pytest.fixture
    def config(self) -> EmailConfig:
        """Return an SMTP configuration."""
        return EmailConfig(
            smtp_host="smtp.example.com",
            smtp_port=587,
            smtp_user="mailer",
            smtp_password="secret",  # pragma: allowlist secret
        )

    @pytest.fixture
    def notifier(self, config: EmailConfig) -> EmailNotifier:
        """Return an email notifier."""
        return EmailNotifier(config)

    def test_send_otp_code(self, notifier: EmailNotifier) -> None:
        """Test that the code is mailed to the recipient over TLS."""
        with patch("smtplib.SMTP") as mock_smtp:
            server = MagicMock()
            mock_smtp.return_value.__enter__.return_value = server

            result = notifier.send_otp_code("user@example.com", "123456", 10)

            assert result is True
            mock_smtp.assert_called_once_with("smtp.example.com", 587)
            server.starttls.assert_called_once()
            server.login.assert_called_once_with("mailer", "secret")
            from_email, to_emails, message = server.sendmail.call_args.args
            assert from_email == "no-reply@medsync.example.com"
            assert to_emails == ["user@example.com"]
            assert "123456" in message
            assert "Subject: Your MedSync verification code" in message

    def test_send_without_login(self) -> None:
        """Test that login is skipped without credentials."""
        notifier = EmailNotifier(EmailConfig(smtp_host="localhost", use_tls=False))
        with patch("smtplib.SMTP") as mock_smtp:
            server = MagicMock()
            mock_smtp.return_value.__enter__.return_value = server

            assert notifier.send(["user@example.com"], "Hi", "<p>Hi</p>") is True

            server.starttls.assert_not_called()
            server.login.assert_not_called()

    def test_send_smtp_error(self, notifier: EmailNotifier) -> None:
        """Test that SMTP failures report False."""
        with patch("smtplib.SMTP") as mock_smtp:
            server = MagicMock()
            server.sendmail.side_effect = smtplib.SMTPException("rejected")
            mock_smtp.return_value.__enter__.return_value = server

            assert notifier.send_otp_code("user@example.com", "123456", 10) is False

    def test_send_connection_error(self, notifier: EmailNotifier) -> None:
        """Test that connection failures report False."""
        with patch("smtplib.SMTP", side_effect=ConnectionRefusedError()):
            assert notifier.send_otp_code("user@example.com", "123456", 10) is False
