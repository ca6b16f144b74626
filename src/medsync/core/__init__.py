"""Core domain - flow logic with no transport or delivery code."""

from .exceptions import CredentialStoreError, MedsyncError, OtpDeliveryError, OtpThrottledError

__all__ = [
    "CredentialStoreError",
    "MedsyncError",
    "OtpDeliveryError",
    "OtpThrottledError",
]
