"""Collaborator protocols for the credential recovery flow.

The recovery controllers never see an issued code or a stored password.
They talk to two collaborators:
- An OTP gateway that issues codes and answers accept/reject
- A credential store that receives the new password at completion

Mock implementations (console gateway, in-memory store in demo mode)
and production ones live in medsync.adapters.auth.
"""

from typing import Protocol, runtime_checkable

from medsync.core.auth.types import DeliveryReceipt, RecoveryMethod


@runtime_checkable
class OtpGateway(Protocol):
    """Protocol for one-time code delivery and verification.

    Example implementations:
    - ConsoleOtpGateway: Prints a fixed demo code (mock mode)
    - IssuingOtpGateway: Random codes over SMTP or an SMS webhook
    """

    async def request_otp(self, identifier: str, method: RecoveryMethod) -> DeliveryReceipt:
        """Issue a code and send it to the identifier.

        Args:
            identifier: Email address or phone number.
            method: Channel to deliver on.

        Returns:
            DeliveryReceipt describing where the code went.

        Raises:
            OtpDeliveryError: If the code could not be delivered.
        """
        ...

    async def verify_otp(self, identifier: str, method: RecoveryMethod, candidate: str) -> bool:
        """Check a candidate code.

        Expiry and attempt limits are the gateway's concern.

        Args:
            identifier: Identifier the code was sent to.
            method: Channel the code was sent on.
            candidate: Code typed by the user.

        Returns:
            True if the candidate is accepted.
        """
        ...


@runtime_checkable
class CredentialStore(Protocol):
    """Protocol for the store that receives a new password."""

    async def commit_new_password(self, identifier: str, new_password: str) -> bool:
        """Replace the password of the account behind an identifier.

        Args:
            identifier: Verified email address or phone number.
            new_password: Plaintext password (store decides how to hash).

        Returns:
            True if the password was stored.
        """
        ...
