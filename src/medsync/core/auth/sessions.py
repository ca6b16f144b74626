"""Registries of live flows for the HTTP surface.

Flows are keyed by an opaque session id. A session idle for longer than
the idle timeout is torn down the next time the registry is touched, and
the registry never holds more than `max_sessions` flows: creating one
past the cap evicts the least recently used session.
"""

from __future__ import annotations

import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

from medsync.core.auth.base import FlowBase
from medsync.core.auth.controller import RecoveryConfig, RecoveryFlowController
from medsync.core.auth.recovery import CredentialStore, OtpGateway
from medsync.core.auth.types import RecoveryMethod
from medsync.core.auth.verification import (
    VERIFICATION_COOLDOWN_SECONDS,
    EmailVerificationController,
)

logger = structlog.get_logger()

SESSION_ID_BYTES = 16
SESSION_IDLE_TIMEOUT_SECONDS = 15 * 60
MAX_SESSIONS = 10_000

FlowT = TypeVar("FlowT", bound=FlowBase)


@dataclass
class SessionEntry(Generic[FlowT]):
    """A live flow and when it was last used."""

    flow: FlowT
    last_touched: float


class FlowRegistry(Generic[FlowT]):
    """Owns flows keyed by session id, with idle expiry and a size cap.

    Discarding a session tears its flow down, so its cooldown timer and
    in-flight requests never outlive it.
    """

    def __init__(
        self,
        idle_timeout_seconds: float = SESSION_IDLE_TIMEOUT_SECONDS,
        max_sessions: int = MAX_SESSIONS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the registry.

        Args:
            idle_timeout_seconds: Seconds without use before a session expires.
            max_sessions: Most sessions held at once.
            clock: Source of the current time in seconds.
        """
        self.idle_timeout_seconds = idle_timeout_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: dict[str, SessionEntry[FlowT]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> FlowT | None:
        """Look up a live flow and mark it as used.

        An expired session is discarded and reported as missing.
        """
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        now = self._clock()
        if self._expired(entry, now):
            self.discard(session_id)
            logger.debug("session_expired", registry=type(self).__name__)
            return None
        entry.last_touched = now
        return entry.flow

    def discard(self, session_id: str) -> bool:
        """Tear down and forget a flow.

        Returns:
            True if the session existed.
        """
        entry = self._sessions.pop(session_id, None)
        if entry is None:
            return False
        entry.flow.close()
        logger.debug(
            "session_discarded",
            registry=type(self).__name__,
            session_count=len(self._sessions),
        )
        return True

    def sweep(self) -> int:
        """Discard every expired session.

        Returns:
            Number of sessions removed.
        """
        now = self._clock()
        expired = [sid for sid, entry in self._sessions.items() if self._expired(entry, now)]
        for session_id in expired:
            self.discard(session_id)
        if expired:
            logger.info("sessions_expired", registry=type(self).__name__, count=len(expired))
        return len(expired)

    def close_all(self) -> None:
        """Tear down every flow (application shutdown)."""
        for session_id in list(self._sessions):
            self.discard(session_id)

    def _add(self, flow: FlowT) -> str:
        self.sweep()
        while len(self._sessions) >= self.max_sessions:
            oldest = min(self._sessions, key=lambda sid: self._sessions[sid].last_touched)
            self.discard(oldest)
            logger.warning("session_evicted", registry=type(self).__name__)

        session_id = secrets.token_urlsafe(SESSION_ID_BYTES)
        self._sessions[session_id] = SessionEntry(flow=flow, last_touched=self._clock())
        logger.debug(
            "session_created",
            registry=type(self).__name__,
            session_count=len(self._sessions),
        )
        return session_id

    def _expired(self, entry: SessionEntry[FlowT], now: float) -> bool:
        return now - entry.last_touched > self.idle_timeout_seconds


class RecoverySessionRegistry(FlowRegistry[RecoveryFlowController]):
    """Live password recovery flows."""

    def __init__(
        self,
        gateway: OtpGateway,
        store: CredentialStore,
        config: RecoveryConfig | None = None,
        idle_timeout_seconds: float = SESSION_IDLE_TIMEOUT_SECONDS,
        max_sessions: int = MAX_SESSIONS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the registry.

        Args:
            gateway: Gateway handed to every new controller.
            store: Credential store handed to every new controller.
            config: Flow tuning for new controllers.
            idle_timeout_seconds: Seconds without use before a session expires.
            max_sessions: Most sessions held at once.
            clock: Source of the current time in seconds.
        """
        super().__init__(idle_timeout_seconds, max_sessions, clock)
        self._gateway = gateway
        self._store = store
        self._config = config or RecoveryConfig()

    def create(
        self, method: RecoveryMethod = RecoveryMethod.EMAIL
    ) -> tuple[str, RecoveryFlowController]:
        """Start a new recovery flow.

        Args:
            method: Channel the identifier form starts on.

        Returns:
            Tuple of (session_id, controller).
        """
        controller = RecoveryFlowController(
            self._gateway,
            self._store,
            config=self._config,
            method=method,
        )
        return self._add(controller), controller


class VerificationSessionRegistry(FlowRegistry[EmailVerificationController]):
    """Live sign-up e-mail verification flows."""

    def __init__(
        self,
        gateway: OtpGateway,
        cooldown_seconds: int = VERIFICATION_COOLDOWN_SECONDS,
        tick_interval: float = 1.0,
        idle_timeout_seconds: float = SESSION_IDLE_TIMEOUT_SECONDS,
        max_sessions: int = MAX_SESSIONS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the registry.

        Args:
            gateway: Gateway handed to every new controller.
            cooldown_seconds: Resend cooldown for new controllers.
            tick_interval: Real seconds per cooldown unit.
            idle_timeout_seconds: Seconds without use before a session expires.
            max_sessions: Most sessions held at once.
            clock: Source of the current time in seconds.
        """
        super().__init__(idle_timeout_seconds, max_sessions, clock)
        self._gateway = gateway
        self._cooldown_seconds = cooldown_seconds
        self._tick_interval = tick_interval

    def create(self, email: str) -> tuple[str, EmailVerificationController]:
        """Start verifying an address.

        Returns:
            Tuple of (session_id, controller). No code is sent yet.
        """
        controller = EmailVerificationController(
            self._gateway,
            email,
            cooldown_seconds=self._cooldown_seconds,
            tick_interval=self._tick_interval,
        )
        return self._add(controller), controller
