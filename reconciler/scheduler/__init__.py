"""
Scheduler — explicit, cancellable delays.

    from reconciler import scheduler as S

    token = S.CancellationToken()
    await S.AsyncioScheduler().sleep(2.0, token)   # raises OperationCancelled
                                                  # if token.cancel() fires

Tests inject ``RecordingScheduler`` and assert on ``.sleeps``.
"""

from reconciler.scheduler._token import CancellationToken
from reconciler.scheduler._scheduler import (
    Scheduler,
    AsyncioScheduler,
    RecordingScheduler,
)

__all__ = (
    "CancellationToken",
    "Scheduler",
    "AsyncioScheduler",
    "RecordingScheduler",
)
