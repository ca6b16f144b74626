"""Dependency injection and application lifespan management."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import Request

from medsync.adapters.auth.credentials import DEMO_PASSWORD, InMemoryCredentialStore
from medsync.adapters.auth.otp_console import DEMO_OTP, ConsoleOtpGateway
from medsync.adapters.auth.otp_issuing import IssuingOtpGateway
from medsync.adapters.notifications.email import EmailConfig, EmailNotifier
from medsync.adapters.notifications.sms import SmsConfig, SmsNotifier
from medsync.core.auth.controller import RecoveryConfig
from medsync.core.auth.recovery import OtpGateway
from medsync.core.auth.sessions import RecoverySessionRegistry, VerificationSessionRegistry

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = structlog.get_logger()


class Settings:
    """Application settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        # Demo backdoor: console OTP gateway and demo password
        self.mock_mode = os.getenv("MEDSYNC_MOCK_MODE", "").lower() == "true"
        self.demo_otp = os.getenv("MEDSYNC_DEMO_OTP", DEMO_OTP)
        self.demo_password = os.getenv("MEDSYNC_DEMO_PASSWORD", DEMO_PASSWORD)

        # Flow settings
        self.resend_cooldown_seconds = int(os.getenv("OTP_RESEND_COOLDOWN_SECONDS", "60"))
        self.otp_expiry_minutes = int(os.getenv("OTP_EXPIRY_MINUTES", "10"))

        # Delivery channels
        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER") or None
        self.smtp_password = os.getenv("SMTP_PASSWORD") or None
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL", "no-reply@medsync.example.com")
        self.sms_webhook_url = os.getenv("SMS_WEBHOOK_URL", "")
        self.sms_webhook_secret = os.getenv("SMS_WEBHOOK_SECRET") or None


settings = Settings()


def build_credential_store(settings: Settings) -> InMemoryCredentialStore:
    """Create the credential store for the configured mode."""
    return InMemoryCredentialStore(
        demo_mode=settings.mock_mode,
        demo_password=settings.demo_password,
    )


def build_otp_gateway(settings: Settings, store: InMemoryCredentialStore) -> OtpGateway:
    """Create the OTP gateway for the configured mode.

    Mock mode prints a fixed code to the console. Otherwise codes are
    delivered over whichever channels are configured; a missing channel
    surfaces as a dispatch failure for that method.
    """
    if settings.mock_mode:
        return ConsoleOtpGateway(demo_code=settings.demo_otp)

    email_notifier = None
    if settings.smtp_host:
        email_notifier = EmailNotifier(
            EmailConfig(
                smtp_host=settings.smtp_host,
                smtp_port=settings.smtp_port,
                smtp_user=settings.smtp_user,
                smtp_password=settings.smtp_password,
                from_email=settings.smtp_from_email,
            )
        )

    sms_notifier = None
    if settings.sms_webhook_url:
        sms_notifier = SmsNotifier(
            SmsConfig(url=settings.sms_webhook_url, secret=settings.sms_webhook_secret)
        )

    return IssuingOtpGateway(
        email_notifier=email_notifier,
        sms_notifier=sms_notifier,
        directory=store,
        expiry_minutes=settings.otp_expiry_minutes,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - setup and teardown.

    This context manager handles:
    - Credential store and OTP gateway selection (mock or issuing)
    - Recovery and verification session registry setup
    - Tearing down live sessions on shutdown
    """
    store = build_credential_store(settings)
    gateway = build_otp_gateway(settings, store)
    registry = RecoverySessionRegistry(
        gateway,
        store,
        RecoveryConfig(cooldown_seconds=settings.resend_cooldown_seconds),
    )
    verification_sessions = VerificationSessionRegistry(gateway)

    app.state.credential_store = store
    app.state.otp_gateway = gateway
    app.state.recovery_sessions = registry
    app.state.verification_sessions = verification_sessions

    if settings.mock_mode:
        logger.warning("mock_mode_enabled", demo_otp_accepted=True, demo_password_accepted=True)

    yield

    registry.close_all()
    verification_sessions.close_all()


def get_recovery_sessions(request: Request) -> RecoverySessionRegistry:
    """Get the recovery session registry from app state.

    Args:
        request: The current request.

    Returns:
        The application's RecoverySessionRegistry.
    """
    registry: RecoverySessionRegistry = request.app.state.recovery_sessions
    return registry


def get_credential_store(request: Request) -> InMemoryCredentialStore:
    """Get the credential store from app state.

    Args:
        request: The current request.

    Returns:
        The configured InMemoryCredentialStore.
    """
    store: InMemoryCredentialStore = request.app.state.credential_store
    return store


def get_verification_sessions(request: Request) -> VerificationSessionRegistry:
    """Get the e-mail verification session registry from app state.

    Args:
        request: The current request.

    Returns:
        The application's VerificationSessionRegistry.
    """
    registry: VerificationSessionRegistry = request.app.state.verification_sessions
    return registry
