"""
Location: python/flowchat_runtime/cancellation.py

Summary:
    Per-run cancellation token. Every suspension point of a run (sending
    the request, awaiting the next body chunk, reading a whole body) is
    raced against the token, so cancel() aborts an in-flight read instead
    of waiting for the next byte to arrive.

Example:
    token = CancellationToken()
    chunk = await token.guard(next_chunk())   # raises RunCancelled once cancelled
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


class RunCancelled(Exception):
    """Raised inside a run when its token has been cancelled."""
    pass


class CancellationToken:
    """
    Cooperative cancellation for one run.

    Not thread-safe: cancel() must be called on the event loop running
    the guarded awaitables.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation. Repeated calls keep the first reason."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise RunCancelled if cancellation has been requested."""
        if self._event.is_set():
            raise RunCancelled(self._reason or "run cancelled")

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` unless the token is cancelled first.

        On cancellation the awaitable's task is cancelled and awaited
        before RunCancelled is raised, so the underlying I/O is released.

        Raises:
            RunCancelled: If the token is, or becomes, cancelled
        """
        if self._event.is_set():
            # never awaited
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            self.raise_if_cancelled()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task.done():
            return task.result()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise RunCancelled(self._reason or "run cancelled")
