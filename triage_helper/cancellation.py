"""Cooperative cancellation for pipeline runs."""

import asyncio
import inspect
from collections.abc import Awaitable
from typing import TypeVar

from .errors import RunCancelled

T = TypeVar("T")


class CancellationToken:
    """Signals that the run owning this token has been superseded."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RunCancelled("Run was superseded")


async def run_bounded(
    awaitable: Awaitable[T],
    timeout: float | None,
    cancel: CancellationToken | None = None,
) -> T:
    """Await ``awaitable`` unless the deadline or a cancellation comes first.

    Whichever side loses the race is cancelled, so a late response is never
    delivered to the caller.

    Args:
        awaitable: The request to run
        timeout: Deadline in seconds, or None for no deadline
        cancel: Token of the run issuing the request

    Returns:
        The awaitable's result

    Raises:
        asyncio.TimeoutError: If the deadline elapsed first
        RunCancelled: If the token was cancelled first
    """
    if cancel is not None and cancel.cancelled:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise RunCancelled("Run was superseded")

    request = asyncio.ensure_future(awaitable)
    waiters: set[asyncio.Future] = {request}
    cancelled = None
    if cancel is not None:
        cancelled = asyncio.ensure_future(cancel.wait())
        waiters.add(cancelled)

    try:
        done, _ = await asyncio.wait(
            waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        for waiter in waiters:
            if not waiter.done():
                waiter.cancel()

    if request in done:
        return request.result()
    if cancelled is not None and cancelled in done:
        raise RunCancelled("Run was superseded")
    raise asyncio.TimeoutError(f"Request timed out after {timeout}s")
