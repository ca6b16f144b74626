"""Sign-up e-mail verification.

After registration the user proves ownership of their address by typing
the 6-digit code sent to it. Resend is allowed every 30 seconds and
clears whatever was typed.
"""

from __future__ import annotations

import structlog

from medsync.core.auth.base import FlowBase
from medsync.core.auth.messages import (
    VERIFICATION_OTP_INCOMPLETE,
    VERIFICATION_OTP_REJECTED,
    code_resent,
    code_sent,
)
from medsync.core.auth.recovery import OtpGateway
from medsync.core.auth.types import FlowError, RecoveryErrorCode, RecoveryMethod
from medsync.core.auth.validation import is_complete_otp, mask_identifier

logger = structlog.get_logger()

VERIFICATION_COOLDOWN_SECONDS = 30


class EmailVerificationController(FlowBase):
    """Verifies one e-mail address with a one-time code."""

    def __init__(
        self,
        gateway: OtpGateway,
        email: str,
        cooldown_seconds: int = VERIFICATION_COOLDOWN_SECONDS,
        tick_interval: float = 1.0,
    ) -> None:
        """Initialize the controller.

        Args:
            gateway: Issues and verifies one-time codes.
            email: Address being verified.
            cooldown_seconds: Wait between dispatches.
            tick_interval: Real seconds per cooldown unit.
        """
        super().__init__(tick_interval)
        self._gateway = gateway
        self.email = email
        self.cooldown_seconds = cooldown_seconds
        self._candidate = ""
        self._verified = False

    @property
    def verified(self) -> bool:
        """Whether the address has been verified."""
        return self._verified

    @property
    def candidate(self) -> str:
        """Last code submitted."""
        return self._candidate

    async def send(self) -> None:
        """Dispatch the first code and start the cooldown."""
        if self._closed or self._verified or self._guard_busy("send"):
            return
        await self._dispatch(first=True)

    async def submit_code(self, code: str) -> None:
        """Verify a typed code.

        Args:
            code: Code as typed.
        """
        if self._closed or self._verified:
            self._ignored("submit_code", "closed" if self._closed else "verified")
            return
        if self._guard_busy("submit_code"):
            return
        self._candidate = code
        if not is_complete_otp(code):
            self._set_flow_error(
                FlowError(RecoveryErrorCode.OTP_INCOMPLETE, VERIFICATION_OTP_INCOMPLETE)
            )
            return

        self._error = None
        result = await self._call(self._gateway.verify_otp(self.email, RecoveryMethod.EMAIL, code))
        if result is None:
            return
        if not result.ok or not result.value:
            if result.error is not None:
                logger.warning(
                    "email_verification_check_failed",
                    destination=mask_identifier(self.email, RecoveryMethod.EMAIL),
                    error=str(result.error),
                )
            self._set_flow_error(
                FlowError(RecoveryErrorCode.OTP_REJECTED, VERIFICATION_OTP_REJECTED)
            )
            return

        self._verified = True
        self._cooldown.cancel()
        self._clear_messages()
        logger.info(
            "email_verified",
            destination=mask_identifier(self.email, RecoveryMethod.EMAIL),
        )

    async def resend(self) -> None:
        """Send a new code once the cooldown has run out.

        Clears the typed code and any error.
        """
        if self._closed or self._verified or self._guard_busy("resend"):
            return
        if not self.can_resend:
            self._ignored("resend", "cooldown")
            return
        self._candidate = ""
        await self._dispatch(first=False)

    async def _dispatch(self, first: bool) -> None:
        self._clear_messages()
        result = await self._call(self._gateway.request_otp(self.email, RecoveryMethod.EMAIL))
        if result is None:
            return
        if not result.ok:
            logger.warning(
                "email_verification_dispatch_failed",
                destination=mask_identifier(self.email, RecoveryMethod.EMAIL),
                error=str(result.error),
            )
            self._set_error(RecoveryErrorCode.DISPATCH_FAILED)
            return

        receipt = result.value
        self._cooldown.start(self.cooldown_seconds)
        if first:
            self._set_info(code_sent(receipt.destination, receipt.expires_in_minutes))
        else:
            self._set_info(code_resent(receipt.destination))
