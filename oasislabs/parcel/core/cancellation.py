"""Explicit cancellation token shared by a transfer and its transport.

Architecture:
    A ``CancellationToken`` is created per download session. The session
    passes it down to every suspension point (``guard``) and registers
    transport cleanup (closing the HTTP response) as a callback, so a single
    ``cancel()`` both wakes any pending await and tears down the socket.

Design Decisions:
    - Token over ``Task.cancel()``: the consumer task is never cancelled, so
      caller-initiated asyncio cancellation stays distinguishable from abort
    - Callbacks run synchronously inside ``cancel()`` so cleanup happens
      before control returns to the caller that aborted
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .exceptions import AbortError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation flag with awaitable and callback hooks."""

    def __init__(self) -> None:
        self._cancelled = False
        self._event: asyncio.Event | None = None
        self._callbacks: list[Callable[[], object]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Cancel the token.

        Returns:
            True if this call cancelled the token, False if it already was.
        """
        if self._cancelled:
            return False
        self._cancelled = True
        if self._event is not None:
            self._event.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.warning(
                    "Cancellation callback failed",
                    extra={"callback": repr(callback), "error": str(e)},
                )
        return True

    def add_callback(self, callback: Callable[[], object]) -> None:
        """Run ``callback`` on cancellation (immediately if already cancelled)."""
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[], object]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        if self._cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    async def guard(
        self,
        awaitable: Awaitable[T],
        *,
        discard: Callable[[T], object] | None = None,
    ) -> T:
        """Await ``awaitable`` unless the token is cancelled first.

        Args:
            awaitable: Operation to run
            discard: Cleanup for a result that arrived in the same step as
                the cancellation and is therefore dropped

        Raises:
            AbortError: If the token is cancelled before or while waiting. The
                pending operation is cancelled and its result discarded.
        """
        if self._cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise AbortError()

        operation = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait({operation, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            operation.cancel()
            raise
        finally:
            if not waiter.done():
                waiter.cancel()

        if self._cancelled:
            if not operation.done():
                operation.cancel()
            elif not operation.cancelled() and operation.exception() is None:
                if discard is not None:
                    discard(operation.result())
            raise AbortError()
        return operation.result()
