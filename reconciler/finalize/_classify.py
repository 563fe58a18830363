"""
Failure classification table — which placement errors are worth waiting out.

Every known-transient backend message lives here and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Disposition(Enum):
    RETRYABLE = auto()
    TERMINAL = auto()


@dataclass(frozen=True, slots=True)
class FailureRule:
    """Case-insensitive substring rule."""

    pattern: str
    disposition: Disposition
    reason: str

    def matches(self, message: str) -> bool:
        return self.pattern.casefold() in message.casefold()


FAILURE_TABLE: tuple[FailureRule, ...] = (
    FailureRule(
        "More information is required for payment",
        Disposition.RETRYABLE,
        "gateway webhook has not reached the backend yet",
    ),
    FailureRule(
        "Internal Server Error",
        Disposition.RETRYABLE,
        "backend still settling the authorization",
    ),
)


def classify_failure(
    message: str | None,
    table: tuple[FailureRule, ...] = FAILURE_TABLE,
) -> Disposition:
    """First matching rule wins; anything unmatched is terminal."""
    if message:
        for rule in table:
            if rule.matches(message):
                return rule.disposition
    return Disposition.TERMINAL


__all__ = ("Disposition", "FailureRule", "FAILURE_TABLE", "classify_failure")
