"""In-memory credential store.

Accounts are addressed by email or phone number. Passwords are kept as
bcrypt hashes. In demo mode the literal password "password" is accepted
for every login, and committing a password for an unknown identifier
creates the account, so the recovery flow can be walked end to end
without seeding.
"""

from __future__ import annotations

import structlog

from medsync.core.auth.password import hash_password, verify_password
from medsync.core.auth.recovery import CredentialStore
from medsync.core.auth.types import Account
from medsync.core.auth.validation import is_valid_email

logger = structlog.get_logger()

DEMO_PASSWORD = "password"  # pragma: allowlist secret


class InMemoryCredentialStore:
    """Credential store backed by a dict of accounts."""

    def __init__(
        self,
        accounts: list[Account] | None = None,
        demo_mode: bool = False,
        demo_password: str = DEMO_PASSWORD,
    ) -> None:
        """Initialize the store.

        Args:
            accounts: Accounts to start with.
            demo_mode: Accept the demo password and auto-create accounts.
            demo_password: Password accepted for any account in demo mode.
        """
        self._accounts: list[Account] = list(accounts or [])
        self.demo_mode = demo_mode
        self._demo_password = demo_password

    def add_account(
        self, email: str | None, password: str, phone: str | None = None
    ) -> Account:
        """Register an account with a plaintext password."""
        account = Account(email=email, phone=phone, password_hash=hash_password(password))
        self._accounts.append(account)
        return account

    def find(self, identifier: str) -> Account | None:
        """Look an account up by email (case-insensitive) or phone."""
        needle = identifier.lower()
        for account in self._accounts:
            if (account.email and account.email.lower() == needle) or account.phone == identifier:
                return account
        return None

    async def has_account(self, identifier: str) -> bool:
        """Whether an identifier belongs to an account."""
        return self.find(identifier) is not None

    async def verify_credentials(self, identifier: str, password: str) -> bool:
        """Check a login attempt.

        Args:
            identifier: Email address or phone number.
            password: Plaintext password.

        Returns:
            True if the password matches (or is the demo password in demo mode).
        """
        if self.demo_mode and password == self._demo_password:
            return True
        account = self.find(identifier)
        if account is None:
            return False
        return verify_password(password, account.password_hash)

    async def commit_new_password(self, identifier: str, new_password: str) -> bool:
        """Replace the password of the account behind an identifier.

        Returns:
            True if stored; False for an unknown identifier outside demo mode.
        """
        account = self.find(identifier)
        if account is None:
            if not self.demo_mode:
                logger.warning("password_commit_unknown_account")
                return False
            if is_valid_email(identifier):
                self.add_account(identifier, new_password)
            else:
                self.add_account(None, new_password, phone=identifier)
            logger.info("demo_account_created")
            return True

        account.password_hash = hash_password(new_password)
        logger.info("password_updated")
        return True


# Verify we implement the protocol
_store: CredentialStore = InMemoryCredentialStore()
