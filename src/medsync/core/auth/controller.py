"""Credential recovery (forgot-password) flow controller.

The controller walks a user through three gated steps:

    EnterIdentifier(method) -> EnterOtp -> SetNewPassword -> Complete

Each step only advances forward, or moves back exactly one step through
an explicit action. All failures land in the error slot; nothing raises
past the controller. The OTP gateway and credential store are injected,
so the demo acceptance values only exist in the mock adapters.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from medsync.core.auth.base import FlowBase
from medsync.core.auth.messages import code_resent, code_sent
from medsync.core.auth.password import is_strong_enough
from medsync.core.auth.recovery import CredentialStore, OtpGateway
from medsync.core.auth.types import (
    Complete,
    EnterIdentifier,
    EnterOtp,
    RecoveryErrorCode,
    RecoveryMethod,
    RecoveryStep,
    SetNewPassword,
)
from medsync.core.auth.validation import is_complete_otp, is_valid_identifier, mask_identifier

logger = structlog.get_logger()


@dataclass(frozen=True)
class RecoveryConfig:
    """Tuning for the recovery flow.

    Attributes:
        cooldown_seconds: Wait between code dispatches.
        tick_interval: Real seconds per cooldown unit.
    """

    cooldown_seconds: int = 60
    tick_interval: float = 1.0


class RecoveryFlowController(FlowBase):
    """Drives one user through password recovery.

    Usage:
        flow = RecoveryFlowController(gateway, store)
        await flow.submit_identifier("user@example.com")
        await flow.submit_otp("123456")
        await flow.submit_new_password("Abcd1234!", "Abcd1234!")
        flow.close()
    """

    def __init__(
        self,
        gateway: OtpGateway,
        store: CredentialStore,
        config: RecoveryConfig | None = None,
        method: RecoveryMethod = RecoveryMethod.EMAIL,
    ) -> None:
        """Initialize the controller at the identifier step.

        Args:
            gateway: Issues and verifies one-time codes.
            store: Receives the new password on completion.
            config: Flow tuning. Uses defaults if not provided.
            method: Channel the identifier form starts on.
        """
        self.config = config or RecoveryConfig()
        self._gateway = gateway
        self._store = store
        super().__init__(self.config.tick_interval)
        self._step: RecoveryStep = EnterIdentifier(method)
        self._method = method
        self._identifier: str | None = None
        self._otp_candidate = ""

    # State

    @property
    def step(self) -> RecoveryStep:
        """Current step."""
        return self._step

    @property
    def method(self) -> RecoveryMethod:
        """Selected channel (dispatched channel once past the identifier step)."""
        return self._method

    @property
    def identifier(self) -> str | None:
        """Identifier the current code was dispatched to."""
        return self._identifier

    @property
    def otp_candidate(self) -> str:
        """Last code submitted by the user."""
        return self._otp_candidate

    @property
    def can_resend(self) -> bool:
        """Whether resend is enabled."""
        return isinstance(self._step, EnterOtp) and self._cooldown.remaining == 0

    # Identifier step

    def switch_method(self) -> None:
        """Swap between email and phone on the identifier step.

        Clears the error and dispatches nothing. An identifier submission
        still in flight is abandoned.
        """
        step = self._step
        if not self._accepts(EnterIdentifier, "switch_method"):
            return
        assert isinstance(step, EnterIdentifier)
        self._abandon()
        self._method = step.method.other
        self._step = EnterIdentifier(self._method)
        self._error = None

    async def submit_identifier(self, identifier: str) -> None:
        """Validate an identifier and dispatch a code to it.

        Args:
            identifier: Email address or phone number, per the current method.
        """
        step = self._step
        if not self._accepts(EnterIdentifier, "submit_identifier") or self._guard_busy(
            "submit_identifier"
        ):
            return
        assert isinstance(step, EnterIdentifier)
        method = step.method
        self._clear_messages()

        if not is_valid_identifier(identifier, method):
            self._set_error(RecoveryErrorCode.INVALID_IDENTIFIER_FORMAT, method)
            return

        result = await self._call(self._gateway.request_otp(identifier, method))
        if result is None:
            return
        if not result.ok:
            logger.warning(
                "otp_dispatch_failed",
                method=method.value,
                destination=mask_identifier(identifier, method),
                error=str(result.error),
            )
            self._set_error(RecoveryErrorCode.DISPATCH_FAILED, method)
            return

        receipt = result.value
        self._identifier = identifier
        self._method = method
        self._otp_candidate = ""
        self._step = EnterOtp()
        self._cooldown.start(self.config.cooldown_seconds)
        self._set_info(code_sent(receipt.destination, receipt.expires_in_minutes))
        logger.info(
            "otp_dispatched",
            method=method.value,
            destination=mask_identifier(identifier, method),
        )

    # OTP step

    async def submit_otp(self, candidate: str) -> None:
        """Verify the typed code with the gateway.

        The candidate is kept after a rejection so the user can correct it.

        Args:
            candidate: Code as typed.
        """
        if not self._accepts(EnterOtp, "submit_otp") or self._guard_busy("submit_otp"):
            return
        self._otp_candidate = candidate
        self._error = None

        if not is_complete_otp(candidate):
            self._set_error(RecoveryErrorCode.OTP_INCOMPLETE)
            return

        identifier = self._require_identifier()
        result = await self._call(self._gateway.verify_otp(identifier, self._method, candidate))
        if result is None:
            return
        if not result.ok:
            logger.warning(
                "otp_verify_failed",
                method=self._method.value,
                destination=mask_identifier(identifier, self._method),
                error=str(result.error),
            )
            self._set_error(RecoveryErrorCode.OTP_REJECTED)
            return
        if not result.value:
            logger.info("otp_rejected", method=self._method.value)
            self._set_error(RecoveryErrorCode.OTP_REJECTED)
            return

        self._step = SetNewPassword()
        self._clear_messages()
        logger.info("otp_accepted", method=self._method.value)

    async def resend_otp(self) -> None:
        """Dispatch a fresh code once the cooldown has run out.

        A no-op while the cooldown is running.
        """
        if not self._accepts(EnterOtp, "resend_otp") or self._guard_busy("resend_otp"):
            return
        if self._cooldown.remaining > 0:
            self._ignored("resend_otp", "cooldown")
            return

        identifier = self._require_identifier()
        method = self._method
        self._clear_messages()
        result = await self._call(self._gateway.request_otp(identifier, method))
        if result is None:
            return
        if not result.ok:
            logger.warning(
                "otp_resend_failed",
                method=method.value,
                destination=mask_identifier(identifier, method),
                error=str(result.error),
            )
            self._set_error(RecoveryErrorCode.DISPATCH_FAILED, method)
            return

        self._cooldown.start(self.config.cooldown_seconds)
        self._set_info(code_resent(result.value.destination))
        logger.info("otp_resent", method=method.value)

    def change_identifier(self) -> None:
        """Return to the identifier form for the dispatched method.

        The candidate and error are cleared; the cooldown keeps running.
        """
        if not self._accepts(EnterOtp, "change_identifier"):
            return
        self._abandon()
        self._step = EnterIdentifier(self._method)
        self._otp_candidate = ""
        self._error = None

    # Password step

    async def submit_new_password(self, new_password: str, confirm_password: str) -> None:
        """Check the new password and hand it to the credential store.

        Args:
            new_password: Proposed password.
            confirm_password: Same password typed again.
        """
        if not self._accepts(SetNewPassword, "submit_new_password") or self._guard_busy(
            "submit_new_password"
        ):
            return
        self._error = None

        if not is_strong_enough(new_password):
            self._set_error(RecoveryErrorCode.PASSWORD_TOO_WEAK)
            return
        if not confirm_password or new_password != confirm_password:
            self._set_error(RecoveryErrorCode.PASSWORD_MISMATCH)
            return

        identifier = self._require_identifier()
        result = await self._call(self._store.commit_new_password(identifier, new_password))
        if result is None:
            return
        if not result.ok or not result.value:
            logger.warning(
                "password_commit_failed",
                method=self._method.value,
                destination=mask_identifier(identifier, self._method),
                error=str(result.error) if result.error else None,
            )
            self._set_error(RecoveryErrorCode.COMMIT_FAILED)
            return

        self._step = Complete()
        self._cooldown.cancel()
        self._clear_messages()
        logger.info(
            "password_reset_completed",
            method=self._method.value,
            destination=mask_identifier(identifier, self._method),
        )

    def back(self) -> None:
        """Move back one step.

        SetNewPassword returns to EnterOtp with the candidate and cooldown
        untouched; EnterOtp behaves like change_identifier. Leaving the
        identifier step or Complete belongs to the caller.
        Ignored while a password commit is in flight.
        """
        if self._closed:
            self._ignored("back", "closed")
            return
        if isinstance(self._step, SetNewPassword):
            if self._guard_busy("back"):
                return
            self._abandon()
            self._step = EnterOtp()
            self._error = None
        elif isinstance(self._step, EnterOtp):
            self.change_identifier()
        else:
            self._ignored("back", self._step.name)

    # Helpers

    def _accepts(self, step_type: type, action: str) -> bool:
        if self._closed:
            self._ignored(action, "closed")
            return False
        if not isinstance(self._step, step_type):
            self._ignored(action, self._step.name)
            return False
        return True

    def _require_identifier(self) -> str:
        # Past the identifier step an identifier is always recorded.
        assert self._identifier is not None
        return self._identifier
