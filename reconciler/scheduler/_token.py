"""
Cancellation token — one per finalization run.
"""

from __future__ import annotations

import asyncio

from reconciler.errors import OperationCancelled


class CancellationToken:
    """
    Cooperative cancellation flag.

    The owner of a run calls ``cancel()`` when the hosting request goes away;
    every scheduled wait observes it and raises ``OperationCancelled``.
    In-flight backend calls are never interrupted by it.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled()

    async def wait(self) -> None:
        await self._event.wait()


__all__ = ("CancellationToken",)
