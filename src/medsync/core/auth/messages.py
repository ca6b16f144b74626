"""User-facing messages for the recovery and verification flows."""

from medsync.core.auth.types import FlowError, RecoveryErrorCode, RecoveryMethod
from medsync.core.auth.validation import phone_suffix

INVALID_EMAIL = "Please enter a valid email address."
INVALID_PHONE = "Please enter a valid phone number with country code (e.g. +15550000000)."
OTP_INCOMPLETE = "Please enter a valid 6-digit code."
OTP_REJECTED = "Invalid or expired code. Please try again."
PASSWORD_TOO_WEAK = "Use 8+ characters with a mix of uppercase letters, numbers and symbols."
PASSWORD_MISMATCH = "Passwords do not match."
DISPATCH_FAILED = "We couldn't send a code right now. Please try again."
COMMIT_FAILED = "We couldn't update your password right now. Please try again."

VERIFICATION_OTP_INCOMPLETE = "Please enter the complete 6-digit code."
VERIFICATION_OTP_REJECTED = "Invalid code. Please try again."

_DEFAULT_MESSAGES = {
    RecoveryErrorCode.OTP_INCOMPLETE: OTP_INCOMPLETE,
    RecoveryErrorCode.OTP_REJECTED: OTP_REJECTED,
    RecoveryErrorCode.PASSWORD_TOO_WEAK: PASSWORD_TOO_WEAK,
    RecoveryErrorCode.PASSWORD_MISMATCH: PASSWORD_MISMATCH,
    RecoveryErrorCode.DISPATCH_FAILED: DISPATCH_FAILED,
    RecoveryErrorCode.COMMIT_FAILED: COMMIT_FAILED,
}


def flow_error(code: RecoveryErrorCode, method: RecoveryMethod | None = None) -> FlowError:
    """Build the error for a code.

    Args:
        code: Error code.
        method: Active method; picks the wording of identifier errors.

    Returns:
        FlowError carrying the user-facing message.
    """
    if code is RecoveryErrorCode.INVALID_IDENTIFIER_FORMAT:
        message = INVALID_PHONE if method is RecoveryMethod.PHONE else INVALID_EMAIL
        return FlowError(code=code, message=message)
    return FlowError(code=code, message=_DEFAULT_MESSAGES[code])


def describe_destination(identifier: str, method: RecoveryMethod) -> str:
    """Where a code went, phrased for the user.

    Emails are shown in full; phones only by their last four digits.
    """
    if method is RecoveryMethod.EMAIL:
        return identifier
    return f"your phone ending in {phone_suffix(identifier)}"


def code_sent(destination: str, expires_in_minutes: int) -> str:
    """Info shown after the first code for an identifier is sent."""
    return (
        f"We've sent a 6-digit code to {destination}. "
        f"It expires in {expires_in_minutes} minutes."
    )


def code_resent(destination: str) -> str:
    """Info shown after a resend."""
    return f"A new code has been sent to {destination}."
