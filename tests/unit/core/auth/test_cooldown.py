"""Unit tests for CooldownTimer."""

from __future__ import annotations

import asyncio

from medsync.core.auth.cooldown import CooldownTimer


class TestCooldownTimer:
    """Tests for CooldownTimer."""

    def test_idle_timer(self) -> None:
        """Test that a new timer has nothing remaining and no task."""
        timer = CooldownTimer()

        assert timer.remaining == 0
        assert timer.running is False

    async def test_start_sets_remaining(self) -> None:
        """Test that start schedules ticks from the given value."""
        timer = CooldownTimer(interval=3600)
        timer.start(60)

        assert timer.remaining == 60
        assert timer.running is True

        timer.cancel()

    async def test_start_zero_schedules_nothing(self) -> None:
        """Test that a zero cooldown does not start a task."""
        timer = CooldownTimer()
        timer.start(0)

        assert timer.remaining == 0
        assert timer.running is False

    async def test_tick_decrements(self) -> None:
        """Test that each tick removes one unit."""
        timer = CooldownTimer(interval=3600)
        timer.start(3)

        timer.tick()
        timer.tick()

        assert timer.remaining == 1
        timer.cancel()

    async def test_tick_never_goes_negative(self) -> None:
        """Test that ticking past zero stays at zero and stops the task."""
        timer = CooldownTimer(interval=3600)
        timer.start(2)

        for _ in range(5):
            timer.tick()

        assert timer.remaining == 0
        assert timer.running is False

    async def test_counts_down_to_zero(self) -> None:
        """Test that the task ticks to zero and finishes."""
        timer = CooldownTimer(interval=0.001)
        timer.start(5)

        await timer.wait()

        assert timer.remaining == 0
        assert timer.running is False

    async def test_restart_replaces_previous_task(self) -> None:
        """Test that start cancels the running countdown."""
        timer = CooldownTimer(interval=3600)
        timer.start(5)
        first = timer._task
        assert first is not None

        timer.start(10)
        await asyncio.wait({first})

        assert first.cancelled()
        assert timer.remaining == 10
        assert timer.running is True
        timer.cancel()

    async def test_cancel_keeps_remaining(self) -> None:
        """Test that cancel freezes the count."""
        timer = CooldownTimer(interval=3600)
        timer.start(30)
        timer.tick()

        timer.cancel()

        assert timer.remaining == 29
        assert timer.running is False

    async def test_wait_without_task_returns(self) -> None:
        """Test that waiting on an idle timer returns immediately."""
        timer = CooldownTimer()

        await timer.wait()

        assert timer.remaining == 0

    async def test_wait_returns_on_cancel(self) -> None:
        """Test that a waiter is released when the countdown is cancelled."""
        timer = CooldownTimer(interval=3600)
        timer.start(10)
        waiter = asyncio.create_task(timer.wait())
        await asyncio.sleep(0)

        timer.cancel()
        await asyncio.wait_for(waiter, timeout=1)

        assert timer.remaining == 10
