"""Auth adapters."""

from medsync.adapters.auth.credentials import InMemoryCredentialStore
from medsync.adapters.auth.otp_console import ConsoleOtpGateway
from medsync.adapters.auth.otp_issuing import IssuingOtpGateway

__all__ = ["ConsoleOtpGateway", "InMemoryCredentialStore", "IssuingOtpGateway"]
