"""Production OTP gateway.

Generates random 6-digit codes, keeps only their SHA-256 hash, and
delivers them through the email (SMTP) or SMS (webhook) notifier.

Guards:
- Codes expire after 10 minutes and are consumed on first success
- At most 5 verification attempts per issued code
- At most 5 code requests per destination per rolling hour
- Unknown destinations get a normal receipt and no delivery, so the
  response does not reveal whether an account exists
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

import structlog

from medsync.adapters.notifications.email import EmailNotifier
from medsync.adapters.notifications.sms import SmsNotifier
from medsync.core.auth.messages import describe_destination
from medsync.core.auth.otp import (
    MAX_VERIFY_ATTEMPTS,
    OTP_EXPIRY_MINUTES,
    codes_match,
    generate_otp,
    get_otp_expiry,
    hash_otp,
    is_otp_expired,
)
from medsync.core.auth.recovery import OtpGateway
from medsync.core.auth.types import DeliveryReceipt, RecoveryMethod
from medsync.core.auth.validation import mask_identifier
from medsync.core.exceptions import OtpDeliveryError, OtpThrottledError

logger = structlog.get_logger()

MAX_REQUESTS_PER_HOUR = 5
_THROTTLE_WINDOW = timedelta(hours=1)


class AccountDirectory(Protocol):
    """Answers whether an identifier belongs to an account."""

    async def has_account(self, identifier: str) -> bool:
        """Check whether an email address or phone number is registered."""
        ...


@dataclass
class IssuedCode:
    """A code awaiting verification. The plaintext is never kept."""

    code_hash: str
    expires_at: datetime
    attempts: int = 0


@dataclass
class _RequestLog:
    timestamps: list[datetime] = field(default_factory=list)

    def recent(self, now: datetime) -> int:
        self.timestamps = [t for t in self.timestamps if now - t < _THROTTLE_WINDOW]
        return len(self.timestamps)


class IssuingOtpGateway:
    """Issues, delivers and verifies one-time codes."""

    def __init__(
        self,
        email_notifier: EmailNotifier | None = None,
        sms_notifier: SmsNotifier | None = None,
        directory: AccountDirectory | None = None,
        expiry_minutes: int = OTP_EXPIRY_MINUTES,
        max_attempts: int = MAX_VERIFY_ATTEMPTS,
        max_requests_per_hour: int = MAX_REQUESTS_PER_HOUR,
    ) -> None:
        """Initialize the gateway.

        Args:
            email_notifier: Sends codes for the email method.
            sms_notifier: Sends codes for the phone method.
            directory: Optional lookup used to skip delivery to unknown
                destinations.
            expiry_minutes: Lifetime of an issued code.
            max_attempts: Verification attempts allowed per code.
            max_requests_per_hour: Code requests allowed per destination.
        """
        self._email = email_notifier
        self._sms = sms_notifier
        self._directory = directory
        self.expiry_minutes = expiry_minutes
        self.max_attempts = max_attempts
        self.max_requests_per_hour = max_requests_per_hour
        self._codes: dict[tuple[RecoveryMethod, str], IssuedCode] = {}
        self._requests: dict[tuple[RecoveryMethod, str], _RequestLog] = {}

    async def request_otp(self, identifier: str, method: RecoveryMethod) -> DeliveryReceipt:
        """Issue a fresh code and deliver it.

        A new request replaces any code still pending for the destination.

        Raises:
            OtpThrottledError: If the destination asked too often.
            OtpDeliveryError: If the channel is missing or refused the message.
        """
        key = (method, identifier)
        masked = mask_identifier(identifier, method)
        now = datetime.now(UTC)

        self._prune(now)
        log = self._requests.setdefault(key, _RequestLog())
        if log.recent(now) >= self.max_requests_per_hour:
            logger.warning("otp_request_throttled", method=method.value, destination=masked)
            raise OtpThrottledError("Too many codes requested", method=method.value)
        log.timestamps.append(now)

        receipt = DeliveryReceipt(
            destination=describe_destination(identifier, method),
            expires_in_minutes=self.expiry_minutes,
        )

        if self._directory is not None and not await self._directory.has_account(identifier):
            logger.info("otp_request_unknown_destination", method=method.value, destination=masked)
            return receipt

        code = generate_otp()
        self._codes[key] = IssuedCode(
            code_hash=hash_otp(code),
            expires_at=get_otp_expiry(self.expiry_minutes),
        )

        try:
            sent = await self._deliver(identifier, method, code)
        except OtpDeliveryError:
            self._codes.pop(key, None)
            raise
        if not sent:
            self._codes.pop(key, None)
            raise OtpDeliveryError("Code delivery failed", method=method.value)

        logger.info("otp_issued", method=method.value, destination=masked)
        return receipt

    async def verify_otp(self, identifier: str, method: RecoveryMethod, candidate: str) -> bool:
        """Check a candidate against the pending code.

        Returns:
            True if the candidate matches a live code. The code is consumed.
        """
        key = (method, identifier)
        issued = self._codes.get(key)
        if issued is None:
            return False

        if is_otp_expired(issued.expires_at):
            self._codes.pop(key, None)
            logger.info("otp_expired", method=method.value)
            return False

        issued.attempts += 1
        if codes_match(candidate, issued.code_hash):
            self._codes.pop(key, None)
            return True

        if issued.attempts >= self.max_attempts:
            self._codes.pop(key, None)
            logger.warning(
                "otp_attempts_exhausted",
                method=method.value,
                destination=mask_identifier(identifier, method),
            )
        return False

    def _prune(self, now: datetime) -> None:
        idle = [key for key, log in self._requests.items() if log.recent(now) == 0]
        for key in idle:
            del self._requests[key]
        stale = [key for key, issued in self._codes.items() if is_otp_expired(issued.expires_at)]
        for key in stale:
            del self._codes[key]

    async def _deliver(self, identifier: str, method: RecoveryMethod, code: str) -> bool:
        if method is RecoveryMethod.EMAIL:
            if self._email is None:
                raise OtpDeliveryError("Email delivery is not configured", method=method.value)
            # SMTP is blocking
            return await asyncio.to_thread(
                self._email.send_otp_code, identifier, code, self.expiry_minutes
            )

        if self._sms is None:
            raise OtpDeliveryError("SMS delivery is not configured", method=method.value)
        return await self._sms.send_otp_code(identifier, code, self.expiry_minutes)


# Verify we implement the protocol
_gateway: OtpGateway = IssuingOtpGateway()
