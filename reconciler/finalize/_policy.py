"""
Finalize policy — attempt budget and timing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


# ═══════════════════════════════════════════════════════════════════════════════
# Policy — Full Configuration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class FinalizePolicy:
    """
    Order finalization policy.

    Fluent builder pattern — chain methods to configure.

    Example:
        policy = (
            FinalizePolicy()
            .with_max_attempts(4)
            .with_backoff(step_seconds=2.0)
            .with_reauthorize_every(2)
        )

    Timeline of a run with the defaults:

        authorize ─ 1s ─ 5s ─ "preparing" ─ 2s ─ place #1
                  ─ 4s ─ re-authorize ─ 1s ─ place #2
                  ─ 6s ─ place #3
                  ─ 8s ─ re-authorize ─ 1s ─ place #4

    Immutable — each method returns new FinalizePolicy.
    """

    max_attempts: int = 4
    backoff_step_seconds: float = 2.0
    reauthorize_every: int = 2
    authorization_settle_seconds: float = 1.0
    initial_settle_seconds: float = 5.0
    preparing_settle_seconds: float = 2.0

    def with_max_attempts(self, attempts: int) -> FinalizePolicy:
        if attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        return replace(self, max_attempts=attempts)

    def with_backoff(self, *, step_seconds: float) -> FinalizePolicy:
        return replace(self, backoff_step_seconds=step_seconds)

    def with_reauthorize_every(self, attempts: int) -> FinalizePolicy:
        if attempts < 1:
            raise ValueError("reauthorize_every must be >= 1")
        return replace(self, reauthorize_every=attempts)

    def with_settle(
        self,
        *,
        authorization: float | None = None,
        initial: float | None = None,
        preparing: float | None = None,
    ) -> FinalizePolicy:
        return replace(
            self,
            authorization_settle_seconds=(
                self.authorization_settle_seconds
                if authorization is None
                else authorization
            ),
            initial_settle_seconds=(
                self.initial_settle_seconds if initial is None else initial
            ),
            preparing_settle_seconds=(
                self.preparing_settle_seconds if preparing is None else preparing
            ),
        )

    def backoff_for(self, attempt: int) -> float:
        """Delay before attempt n; attempt 1 goes out without backoff."""
        if attempt <= 1:
            return 0.0
        return self.backoff_step_seconds * attempt

    def reauthorizes_on(self, attempt: int) -> bool:
        return attempt > 1 and attempt % self.reauthorize_every == 0


__all__ = ("FinalizePolicy",)
