"""
Finalization types — states, attempt records, progress.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto

from reconciler.messages import MessageKey, message


# ═══════════════════════════════════════════════════════════════════════════════
# State Machine
# ═══════════════════════════════════════════════════════════════════════════════


class FinalizationState(Enum):
    """
    Lifecycle:
        IDLE → AUTHORIZING → SETTLING → PLACING_ORDER → SUCCESS
                                            │
                                            ├→ RETRYABLE_FAILURE → PLACING_ORDER
                                            └→ TERMINAL_FAILURE
    """

    IDLE = auto()
    AUTHORIZING = auto()
    SETTLING = auto()
    PLACING_ORDER = auto()
    SUCCESS = auto()
    RETRYABLE_FAILURE = auto()
    TERMINAL_FAILURE = auto()


class AttemptOutcome(Enum):
    SUCCESS = auto()
    RETRYABLE = auto()
    UNEXPECTED_FORMAT = auto()
    TERMINAL = auto()


@dataclass(frozen=True, slots=True)
class FinalizationAttempt:
    """One placement call. Held for the duration of a run, never persisted."""

    attempt_number: int
    started_at: datetime
    outcome: AttemptOutcome
    message: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Progress
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Progress:
    state: FinalizationState
    message_key: MessageKey | None = None
    attempt: int = 0
    max_attempts: int = 0

    def text(self, locale: str | None = None) -> str | None:
        if self.message_key is None:
            return None
        return message(
            self.message_key,
            locale,
            attempt=self.attempt,
            max_attempts=self.max_attempts,
        )


__all__ = (
    "FinalizationState",
    "AttemptOutcome",
    "FinalizationAttempt",
    "Progress",
)
