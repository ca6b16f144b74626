"""Password hashing and strength scoring."""

import base64
import hashlib
import re

import bcrypt

MIN_PASSWORD_LENGTH = 8
MAX_STRENGTH_SCORE = 4
STRONG_ENOUGH_SCORE = 3

_UPPERCASE = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")
_SYMBOL = re.compile(r"[^A-Za-z0-9]")


def _bcrypt_input(password: str) -> bytes:
    # bcrypt rejects inputs over 72 bytes; a base64 SHA-256 digest is 44.
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    The password is SHA-256 digested first, so every character counts
    whatever its length.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash string
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(_bcrypt_input(password), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash.

    Args:
        plain_password: Plain text password to check
        hashed_password: Bcrypt hash to check against

    Returns:
        True if password matches hash
    """
    if not plain_password:
        return False
    return bcrypt.checkpw(_bcrypt_input(plain_password), hashed_password.encode("utf-8"))


def password_strength(password: str) -> int:
    """Score a password from 0 to 4.

    One point each for: at least 8 characters, an ASCII uppercase letter,
    a digit, and a character that is not an ASCII letter or digit.
    Total for any string; the empty string scores 0.

    Args:
        password: Candidate password.

    Returns:
        Number of criteria satisfied.
    """
    score = 0
    if len(password) >= MIN_PASSWORD_LENGTH:
        score += 1
    if _UPPERCASE.search(password):
        score += 1
    if _DIGIT.search(password):
        score += 1
    if _SYMBOL.search(password):
        score += 1
    return score


def is_strong_enough(password: str) -> bool:
    """Whether a password may be submitted as a new credential."""
    return password_strength(password) >= STRONG_ENOUGH_SCORE


def strength_label(score: int) -> str:
    """Map a strength score to the meter colour band it is shown in."""
    if score <= 2:
        return "weak"
    if score == STRONG_ENOUGH_SCORE:
        return "fair"
    return "strong"
