"""
Scheduler — every delay in a run goes through here.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Protocol

from reconciler.errors import OperationCancelled
from reconciler.scheduler._token import CancellationToken


# ═══════════════════════════════════════════════════════════════════════════════
# Scheduler Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Scheduler(Protocol):
    """
    Cancellable sleep.

    Implementations raise ``OperationCancelled`` if the token is cancelled
    before or during the wait.
    """

    async def sleep(self, seconds: float, token: CancellationToken) -> None: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Asyncio Scheduler — Real Time
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncioScheduler:
    """Waits on the token itself, so cancel() wakes a sleeper immediately."""

    async def sleep(self, seconds: float, token: CancellationToken) -> None:
        token.raise_if_cancelled()
        if seconds <= 0:
            return
        try:
            await asyncio.wait_for(token.wait(), timeout=seconds)
        except TimeoutError:
            return
        raise OperationCancelled()


# ═══════════════════════════════════════════════════════════════════════════════
# Recording Scheduler — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class RecordingScheduler:
    """
    Records requested delays without waiting.

    cancel_after: cancel the token once this many sleeps have been recorded,
    to simulate the shopper navigating away mid-run.
    """

    sleeps: list[float] = field(default_factory=list)
    cancel_after: int | None = None

    async def sleep(self, seconds: float, token: CancellationToken) -> None:
        token.raise_if_cancelled()
        self.sleeps.append(seconds)
        if self.cancel_after is not None and len(self.sleeps) >= self.cancel_after:
            token.cancel()
            raise OperationCancelled()
        await asyncio.sleep(0)

    @property
    def total_seconds(self) -> float:
        return sum(self.sleeps)


__all__ = ("Scheduler", "AsyncioScheduler", "RecordingScheduler")
