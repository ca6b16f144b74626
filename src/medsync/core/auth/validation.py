"""Input shape checks for recovery identifiers and codes."""

import re

from medsync.core.auth.types import RecoveryMethod

OTP_LENGTH = 6

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9][0-9]{1,14}$")
_OTP_PATTERN = re.compile(rf"^[0-9]{{{OTP_LENGTH}}}$")


def is_valid_email(value: str) -> bool:
    """Check the local-part@domain.tld shape."""
    return EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_phone(value: str) -> bool:
    """Check an E.164-like number: optional +, 2-15 digits, no leading zero."""
    return PHONE_PATTERN.fullmatch(value) is not None


def is_valid_identifier(value: str, method: RecoveryMethod) -> bool:
    """Validate an identifier for the channel it will be used on.

    Args:
        value: Email address or phone number as typed.
        method: Channel the identifier belongs to.

    Returns:
        True if the identifier has the right shape for the method.
    """
    if method is RecoveryMethod.EMAIL:
        return is_valid_email(value)
    return is_valid_phone(value)


def is_complete_otp(candidate: str) -> bool:
    """Check that a candidate is exactly six ASCII digits."""
    return _OTP_PATTERN.fullmatch(candidate) is not None


def phone_suffix(phone: str, digits: int = 4) -> str:
    """Last digits of a phone number, as shown to the user."""
    return phone[-digits:]


def mask_identifier(value: str, method: RecoveryMethod) -> str:
    """Mask an identifier for log output.

    Emails keep their first character and domain, phones their last
    four digits.
    """
    if method is RecoveryMethod.EMAIL and "@" in value:
        local, _, domain = value.partition("@")
        return f"{local[:1]}***@{domain}"
    return f"***{phone_suffix(value)}"
