"""
Debounce Module
===============

One debounce utility shared by every view: each call schedules the action
after a delay and cancels the call scheduled before it.

Usage:
    debouncer = Debouncer(0.25, view.reload)
    debouncer.call()    # scheduled
    debouncer.call()    # previous call cancelled, rescheduled
    await debouncer.wait()
"""

import asyncio
from typing import Awaitable, Callable, Optional

from contacerta.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


class CancellationToken:
    """Flag checked by a scheduled call before it runs."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class Debouncer:
    """
    Run an async action once calls stop arriving for ``delay`` seconds.

    Args:
        delay: Quiet period in seconds
        action: Coroutine function run after the quiet period
    """

    def __init__(self, delay: float, action: Callable[[], Awaitable[None]]):
        self.delay = delay
        self._action = action
        self._token: Optional[CancellationToken] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._token is not None and not self._token.cancelled

    def call(self) -> CancellationToken:
        """Schedule the action, cancelling the previously scheduled call."""
        self.cancel()
        token = CancellationToken()
        self._token = token
        self._task = asyncio.get_running_loop().create_task(self._run(token))
        return token

    def cancel(self) -> None:
        if self._token is not None:
            self._token.cancel()
        self._token = None

    async def flush(self) -> None:
        """Run a pending call now instead of waiting for the delay."""
        if not self.pending:
            return
        self.cancel()
        await self._action()

    async def wait(self) -> None:
        """Wait for the latest scheduled call to finish."""
        task = self._task
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def _run(self, token: CancellationToken) -> None:
        await asyncio.sleep(self.delay)
        if token.cancelled:
            return
        self._token = None
        try:
            await self._action()
        except Exception as e:
            logger.error("debounced_action_failed", error=str(e), error_type=type(e).__name__)
            raise
