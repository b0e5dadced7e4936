"""Explicit cancellation context for one client session.

One :class:`CancellationToken` is created per submission and passed to every
suspending step (file extraction, the HTTP request, each stream read).
Awaiting through :meth:`CancellationToken.guard` races the step against the
token, so a cancel takes effect at the next suspension point instead of
after the server's next event.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, TypeVar

from deckdigest.errors import SummaryCancelled

T = TypeVar("T")


class CancellationToken:
    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SummaryCancelled("cancelled")

    async def wait(self) -> None:
        await self._event.wait()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await *awaitable* unless the token fires first.

        Raises:
            SummaryCancelled: If the token is (or becomes) cancelled; the
                pending step is cancelled before this returns.
        """
        if self.cancelled and asyncio.iscoroutine(awaitable):
            awaitable.close()
        self.raise_if_cancelled()

        step: asyncio.Future[Any] = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait({step, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            step.cancel()
            raise
        finally:
            waiter.cancel()

        if step.done():
            return step.result()

        step.cancel()
        try:
            await step
        except (asyncio.CancelledError, Exception):  # noqa: BLE001
            # The step's own outcome is irrelevant once cancelled.
            pass
        raise SummaryCancelled("cancelled")
