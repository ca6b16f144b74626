"""One-time code generation and bookkeeping for OTP gateways."""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta

from medsync.core.auth.validation import OTP_LENGTH

# Code configuration
OTP_EXPIRY_MINUTES = 10
MAX_VERIFY_ATTEMPTS = 5


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Generate a cryptographically secure numeric code.

    Returns:
        Zero-padded string of `length` decimal digits.
    """
    return "".join(secrets.choice("0123456789") for _ in range(length))


def hash_otp(code: str) -> str:
    """Hash a code for storage.

    Args:
        code: The plaintext code.

    Returns:
        Hex-encoded SHA-256 hash of the code.
    """
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def codes_match(candidate: str, code_hash: str) -> bool:
    """Compare a candidate against a stored hash in constant time."""
    return secrets.compare_digest(hash_otp(candidate), code_hash)


def get_otp_expiry(minutes: int = OTP_EXPIRY_MINUTES) -> datetime:
    """Calculate code expiry timestamp.

    Args:
        minutes: Number of minutes until expiry.

    Returns:
        UTC datetime when the code expires.
    """
    return datetime.now(UTC) + timedelta(minutes=minutes)


def is_otp_expired(expires_at: datetime) -> bool:
    """Check if a code has expired.

    Args:
        expires_at: The code's expiry timestamp.

    Returns:
        True if the code has expired.
    """
    now = datetime.now(UTC)
    # Handle timezone-naive datetimes
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return now > expires_at
