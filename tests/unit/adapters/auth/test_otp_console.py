"""Tests for the console OTP gateway."""

import pytest

from medsync.adapters.auth.otp_console import DEMO_OTP, ConsoleOtpGateway
from medsync.core.auth.recovery import OtpGateway
from medsync.core.auth.types import RecoveryMethod


class TestConsoleOtpGateway:
    """Test ConsoleOtpGateway."""

    def test_implements_protocol(self) -> None:
        """Should satisfy the OtpGateway protocol."""
        assert isinstance(ConsoleOtpGateway(), OtpGateway)

    async def test_request_prints_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print the demo code and the destination."""
        gateway = ConsoleOtpGateway()

        receipt = await gateway.request_otp("user@example.com", RecoveryMethod.EMAIL)

        output = capsys.readouterr().out
        assert "[ONE-TIME CODE]" in output
        assert "Email: user@example.com" in output
        assert DEMO_OTP in output
        assert receipt.destination == "user@example.com"
        assert receipt.expires_in_minutes == 10

    async def test_phone_receipt_hides_number(self) -> None:
        """Should describe a phone destination by its last digits."""
        gateway = ConsoleOtpGateway()

        receipt = await gateway.request_otp("+15551234567", RecoveryMethod.PHONE)

        assert receipt.destination == "your phone ending in 4567"

    async def test_verify_accepts_demo_code_only(self) -> None:
        """Should accept exactly the configured code."""
        gateway = ConsoleOtpGateway(demo_code="654321")

        assert await gateway.verify_otp("user@example.com", RecoveryMethod.EMAIL, "654321")
        assert not await gateway.verify_otp("user@example.com", RecoveryMethod.EMAIL, "123456")
