"""Tests for the in-memory credential store."""

import pytest

from medsync.adapters.auth.credentials import DEMO_PASSWORD, InMemoryCredentialStore
from medsync.core.auth.recovery import CredentialStore

OLD_PASSWORD = "Old-pass1"  # pragma: allowlist secret
NEW_PASSWORD = "New-pass2"  # pragma: allowlist secret


class TestInMemoryCredentialStore:
    """Test InMemoryCredentialStore."""

    @pytest.fixture
    def store(self) -> InMemoryCredentialStore:
        """Return a store with one email account."""
        store = InMemoryCredentialStore()
        store.add_account("user@example.com", OLD_PASSWORD)
        return store

    def test_implements_protocol(self) -> None:
        """Should satisfy the CredentialStore protocol."""
        assert isinstance(InMemoryCredentialStore(), CredentialStore)

    def test_find_is_case_insensitive(self, store: InMemoryCredentialStore) -> None:
        """Should match emails regardless of case."""
        assert store.find("USER@example.com") is not None
        assert store.find("nobody@example.com") is None

    async def test_verify_credentials(self, store: InMemoryCredentialStore) -> None:
        """Should check the password hash."""
        assert await store.verify_credentials("user@example.com", OLD_PASSWORD) is True
        assert await store.verify_credentials("user@example.com", "wrong") is False
        assert await store.verify_credentials("nobody@example.com", OLD_PASSWORD) is False

    async def test_demo_password_only_in_demo_mode(self, store: InMemoryCredentialStore) -> None:
        """Should not accept the demo password outside demo mode."""
        assert await store.verify_credentials("user@example.com", DEMO_PASSWORD) is False

        demo = InMemoryCredentialStore(demo_mode=True)
        assert await demo.verify_credentials("anyone@example.com", DEMO_PASSWORD) is True

    async def test_has_account(self, store: InMemoryCredentialStore) -> None:
        """Should report known identifiers."""
        assert await store.has_account("user@example.com") is True
        assert await store.has_account("+15551234567") is False

    async def test_commit_replaces_password(self, store: InMemoryCredentialStore) -> None:
        """Should store the new password hash."""
        assert await store.commit_new_password("user@example.com", NEW_PASSWORD) is True

        assert await store.verify_credentials("user@example.com", NEW_PASSWORD) is True
        assert await store.verify_credentials("user@example.com", OLD_PASSWORD) is False

    async def test_commit_unknown_account(self, store: InMemoryCredentialStore) -> None:
        """Should refuse unknown identifiers outside demo mode."""
        assert await store.commit_new_password("nobody@example.com", NEW_PASSWORD) is False

    async def test_demo_commit_creates_accounts(self) -> None:
        """Should create email and phone accounts in demo mode."""
        store = InMemoryCredentialStore(demo_mode=True)

        assert await store.commit_new_password("new@example.com", NEW_PASSWORD) is True
        assert await store.commit_new_password("+15551234567", NEW_PASSWORD) is True

        phone_account = store.find("+15551234567")
        assert phone_account is not None
        assert phone_account.email is None
        assert await store.verify_credentials("new@example.com", NEW_PASSWORD) is True
