"""Tests for settings, wiring and the application lifespan."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from medsync.adapters.auth.credentials import InMemoryCredentialStore
from medsync.adapters.auth.otp_console import ConsoleOtpGateway
from medsync.adapters.auth.otp_issuing import IssuingOtpGateway
from medsync.core.auth.sessions import RecoverySessionRegistry, VerificationSessionRegistry
from medsync.entrypoints.api.app import app
from medsync.entrypoints.api.deps import (
    Settings,
    build_credential_store,
    build_otp_gateway,
)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test values used when nothing is set."""
        for name in ("MEDSYNC_MOCK_MODE", "OTP_RESEND_COOLDOWN_SECONDS", "SMTP_HOST"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.mock_mode is False
        assert settings.demo_otp == "123456"
        assert settings.resend_cooldown_seconds == 60
        assert settings.otp_expiry_minutes == 10
        assert settings.smtp_host == ""

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables override defaults."""
        monkeypatch.setenv("MEDSYNC_MOCK_MODE", "TRUE")
        monkeypatch.setenv("MEDSYNC_DEMO_OTP", "654321")
        monkeypatch.setenv("OTP_RESEND_COOLDOWN_SECONDS", "5")
        monkeypatch.setenv("SMS_WEBHOOK_URL", "https://sms.example.com/send")

        settings = Settings()

        assert settings.mock_mode is True
        assert settings.demo_otp == "654321"
        assert settings.resend_cooldown_seconds == 5
        assert settings.sms_webhook_url == "https://sms.example.com/send"


class TestWiring:
    """Tests for collaborator selection."""

    def test_mock_mode_uses_console_gateway(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that mock mode selects the demo adapters."""
        monkeypatch.setenv("MEDSYNC_MOCK_MODE", "true")
        settings = Settings()

        store = build_credential_store(settings)
        gateway = build_otp_gateway(settings, store)

        assert isinstance(gateway, ConsoleOtpGateway)
        assert store.demo_mode is True

    def test_production_uses_issuing_gateway(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the issuing gateway is used outside mock mode."""
        monkeypatch.delenv("MEDSYNC_MOCK_MODE", raising=False)
        monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
        settings = Settings()

        store = build_credential_store(settings)
        gateway = build_otp_gateway(settings, store)

        assert isinstance(gateway, IssuingOtpGateway)
        assert store.demo_mode is False


class TestApp:
    """Tests for the assembled application."""

    def test_health(self) -> None:
        """Test the health endpoint."""
        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_lifespan_populates_state(self) -> None:
        """Test that startup stores the registries and credential store."""
        with TestClient(app) as client:
            assert isinstance(app.state.recovery_sessions, RecoverySessionRegistry)
            assert isinstance(app.state.verification_sessions, VerificationSessionRegistry)
            assert isinstance(app.state.credential_store, InMemoryCredentialStore)

            response = client.post("/api/v1/recovery/sessions", json={})
            assert response.status_code == 201
