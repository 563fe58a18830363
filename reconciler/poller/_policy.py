"""
Poll policy — how long to wait for a gateway-confirmed payment.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class PollPolicy:
    """
    Status poller configuration.

    Example:
        policy = PollPolicy().with_interval(seconds=3).with_max_checks(10)
    """

    interval_seconds: float = 3.0
    max_checks: int = 10
    confirmed_statuses: frozenset[str] = frozenset({"captured", "confirmed"})

    def with_interval(self, *, seconds: float) -> PollPolicy:
        return replace(self, interval_seconds=seconds)

    def with_max_checks(self, checks: int) -> PollPolicy:
        if checks < 1:
            raise ValueError("max_checks must be >= 1")
        return replace(self, max_checks=checks)

    @property
    def budget_seconds(self) -> float:
        return self.interval_seconds * self.max_checks


__all__ = ("PollPolicy",)
