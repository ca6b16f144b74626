"""Domain-specific exceptions.

All exceptions in the medsync system inherit from MedsyncError,
making it easy to catch all system errors while still being able
to handle specific error types.

Recovery controllers never let these escape: gateway and store
failures are mapped onto the flow's error slot instead.
"""

from __future__ import annotations


class MedsyncError(Exception):
    """Base exception for all medsync errors."""

    pass


class OtpDeliveryError(MedsyncError):
    """A one-time code could not be delivered.

    Raised by OTP gateways when the underlying channel (SMTP, SMS
    webhook) refused or failed to accept the message.

    Attributes:
        method: Channel the delivery was attempted on ("email" or "phone").
    """

    def __init__(self, message: str, method: str | None = None) -> None:
        """Initialize OtpDeliveryError.

        Args:
            message: Error description.
            method: Delivery channel, if known.
        """
        super().__init__(message)
        self.method = method


class OtpThrottledError(OtpDeliveryError):
    """Too many codes were requested for one destination.

    Raised before anything is sent, so the user can retry later
    without a code being burned.
    """

    pass


class CredentialStoreError(MedsyncError):
    """The credential store could not persist a new password."""

    pass
