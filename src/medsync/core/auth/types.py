"""Auth domain types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, EmailStr


class RecoveryMethod(str, Enum):
    """Channel a one-time code is dispatched through."""

    EMAIL = "email"
    PHONE = "phone"

    @property
    def other(self) -> RecoveryMethod:
        """The method the lateral switch action moves to."""
        return RecoveryMethod.PHONE if self is RecoveryMethod.EMAIL else RecoveryMethod.EMAIL


class RecoveryErrorCode(str, Enum):
    """Client-visible failures of the recovery and verification flows."""

    INVALID_IDENTIFIER_FORMAT = "invalid_identifier_format"
    OTP_INCOMPLETE = "otp_incomplete"
    OTP_REJECTED = "otp_rejected"
    PASSWORD_TOO_WEAK = "password_too_weak"
    PASSWORD_MISMATCH = "password_mismatch"
    DISPATCH_FAILED = "dispatch_failed"
    COMMIT_FAILED = "commit_failed"


# Flow steps. Each step is its own type so a step that needs data (the
# identifier form needs a method) cannot exist without it.


@dataclass(frozen=True)
class EnterIdentifier:
    """Collecting an email address or phone number."""

    method: RecoveryMethod
    name: str = "enter_identifier"


@dataclass(frozen=True)
class EnterOtp:
    """Waiting for the one-time code."""

    name: str = "enter_otp"


@dataclass(frozen=True)
class SetNewPassword:
    """Collecting the new password and its confirmation."""

    name: str = "set_new_password"


@dataclass(frozen=True)
class Complete:
    """Password was changed; the caller decides where to go next."""

    name: str = "complete"


RecoveryStep = EnterIdentifier | EnterOtp | SetNewPassword | Complete


@dataclass(frozen=True)
class FlowError:
    """An error shown to the user."""

    code: RecoveryErrorCode
    message: str


@dataclass(frozen=True)
class DeliveryReceipt:
    """Gateway acknowledgement for a dispatched code.

    Attributes:
        destination: Human-readable destination, safe to show the user.
        expires_in_minutes: Expiry the gateway advertises for the code.
    """

    destination: str
    expires_in_minutes: int = 10


class Account(BaseModel):
    """Credential record held by a credential store."""

    email: EmailStr | None = None
    phone: str | None = None
    password_hash: str
