"""Tests for cancellation tokens and bounded awaits."""

import asyncio
import inspect

import pytest

from triage_helper.cancellation import CancellationToken, run_bounded
from triage_helper.errors import RunCancelled


class TestCancellationToken:
    """Test CancellationToken."""

    def test_starts_uncancelled(self) -> None:
        token = CancellationToken()
        assert not token.cancelled
        token.raise_if_cancelled()

    def test_cancel(self) -> None:
        token = CancellationToken()
        token.cancel()
        assert token.cancelled
        with pytest.raises(RunCancelled):
            token.raise_if_cancelled()


class TestRunBounded:
    """Test run_bounded."""

    @pytest.mark.asyncio
    async def test_returns_result(self) -> None:
        """Test that a fast awaitable's result is returned."""

        async def fast() -> str:
            return "done"

        assert await run_bounded(fast(), timeout=1, cancel=CancellationToken()) == "done"

    @pytest.mark.asyncio
    async def test_timeout_cancels_awaitable(self) -> None:
        """Test that the deadline wins and the loser is cancelled."""
        cancelled = asyncio.Event()

        async def slow() -> str:
            try:
                await asyncio.sleep(1)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return "late"

        with pytest.raises(asyncio.TimeoutError):
            await run_bounded(slow(), timeout=0.01)

        await asyncio.wait_for(cancelled.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_cancellation_wins(self) -> None:
        """Test that cancelling the token abandons the awaitable."""
        token = CancellationToken()

        async def slow() -> str:
            await asyncio.sleep(1)
            return "late"

        async def cancel_soon() -> None:
            await asyncio.sleep(0.01)
            token.cancel()

        canceller = asyncio.create_task(cancel_soon())
        with pytest.raises(RunCancelled):
            await run_bounded(slow(), timeout=5, cancel=token)
        await canceller

    @pytest.mark.asyncio
    async def test_already_cancelled_closes_coroutine(self) -> None:
        """Test that a request never started is closed, not left unawaited."""
        token = CancellationToken()
        token.cancel()

        async def request() -> str:
            return "never"

        coro = request()
        with pytest.raises(RunCancelled):
            await run_bounded(coro, timeout=1, cancel=token)

        assert inspect.getcoroutinestate(coro) == inspect.CORO_CLOSED

    @pytest.mark.asyncio
    async def test_exception_propagates(self) -> None:
        """Test that the awaitable's own exception is raised."""

        async def broken() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await run_bounded(broken(), timeout=1)
