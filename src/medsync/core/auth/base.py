"""Shared request handling for OTP-driven flows.

Both the recovery flow and sign-up e-mail verification await a gateway
between a user action and the resulting state change. FlowBase owns the
single in-flight request, the busy flag that guards against double
submits, and teardown.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

import structlog

from medsync.core.auth.cooldown import CooldownTimer
from medsync.core.auth.messages import flow_error
from medsync.core.auth.types import FlowError, RecoveryErrorCode, RecoveryMethod

logger = structlog.get_logger()


@dataclass(frozen=True)
class CallResult:
    """Resolution of a gateway or store call.

    Exactly one of `value` / `error` is meaningful.
    """

    value: Any = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        """Whether the call returned normally."""
        return self.error is None


class FlowBase:
    """Busy guard, in-flight request, messages and teardown."""

    def __init__(self, tick_interval: float = 1.0) -> None:
        """Initialize flow state.

        Args:
            tick_interval: Seconds per cooldown tick.
        """
        self._cooldown = CooldownTimer(tick_interval)
        self._inflight: asyncio.Future[Any] | None = None
        self._busy = False
        self._closed = False
        self._error: FlowError | None = None
        self._info: str | None = None

    @property
    def busy(self) -> bool:
        """Whether a request is awaiting its resolution."""
        return self._busy

    @property
    def closed(self) -> bool:
        """Whether the flow has been torn down."""
        return self._closed

    @property
    def error(self) -> FlowError | None:
        """The error currently shown, if any."""
        return self._error

    @property
    def info_message(self) -> str | None:
        """The info message currently shown, if any."""
        return self._info

    @property
    def cooldown(self) -> CooldownTimer:
        """The resend cooldown timer owned by this flow."""
        return self._cooldown

    @property
    def cooldown_remaining(self) -> int:
        """Seconds until resend is allowed."""
        return self._cooldown.remaining

    @property
    def can_resend(self) -> bool:
        """Whether the resend action is enabled."""
        return self._cooldown.remaining == 0

    def close(self) -> None:
        """Tear the flow down.

        Stops the cooldown ticks and abandons any in-flight request so
        its resolution changes nothing.
        """
        if self._closed:
            return
        self._closed = True
        self._cooldown.cancel()
        self._abandon()
        logger.debug("flow_closed", flow=type(self).__name__)

    def _set_error(self, code: RecoveryErrorCode, method: RecoveryMethod | None = None) -> None:
        self._error = flow_error(code, method)
        self._info = None

    def _set_flow_error(self, error: FlowError) -> None:
        self._error = error
        self._info = None

    def _set_info(self, message: str) -> None:
        self._info = message
        self._error = None

    def _clear_messages(self) -> None:
        self._error = None
        self._info = None

    def _ignored(self, action: str, reason: str) -> None:
        logger.debug("flow_action_ignored", flow=type(self).__name__, action=action, reason=reason)

    def _guard_busy(self, action: str) -> bool:
        """Return True (and log) if an action must be dropped as a double submit."""
        if self._busy:
            self._ignored(action, "busy")
            return True
        return False

    def _abandon(self) -> None:
        """Cancel the in-flight request and release the busy guard."""
        task, self._inflight = self._inflight, None
        self._busy = False
        if task is not None and not task.done():
            task.cancel()

    async def _call(self, awaitable: Awaitable[Any]) -> CallResult | None:
        """Await a collaborator call as the single in-flight request.

        Args:
            awaitable: Gateway or store coroutine.

        Returns:
            CallResult once the call resolves, or None if the request was
            abandoned (flow closed, method switched, step left) meanwhile.
        """
        task = asyncio.ensure_future(awaitable)
        self._inflight = task
        self._busy = True
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            if self._inflight is task:
                self._abandon()
            task.cancel()
            raise

        current = self._inflight is task
        if current:
            self._inflight = None
            self._busy = False
        if not current or task.cancelled() or self._closed:
            logger.debug("flow_request_abandoned", flow=type(self).__name__)
            return None
        error = task.exception()
        if error is not None:
            return CallResult(error=error)
        return CallResult(value=task.result())
