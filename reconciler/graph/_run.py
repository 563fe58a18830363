"""
Graph runner — fluent layer over nodnod.

Builds an agent from the target node, pushes injected values into a fresh
scope and returns the target's value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

from nodnod import EventLoopAgent, Scope, Value


@dataclass(frozen=True, slots=True)
class GraphRun[T]:
    """
    Awaitable, immutable run description.

    Example:
        result = await run(NormalizedResultNode).inject(PlacementPayload(raw))
    """

    target: type[T]
    injections: tuple[tuple[type[Any], Any], ...] = ()

    def inject(self, value: object) -> GraphRun[T]:
        """Inject a value under its runtime type."""
        return GraphRun(self.target, (*self.injections, (type(value), value)))

    def __await__(self) -> Any:
        return self._execute().__await__()

    async def _execute(self) -> T:
        agent = EventLoopAgent.build({self.target})  # type: ignore[arg-type]
        async with Scope(detail=f"run:{self.target.__name__}") as scope:
            for typ, value in self.injections:
                scope.push(Value(typ, value))
            await agent.run(scope, {})
            found = scope.get(self.target)
            if found is None:
                raise LookupError(f"{self.target.__name__} not resolved")
            return cast(T, found.value)


def run[T](target: type[T]) -> GraphRun[T]:
    return GraphRun(target)


__all__ = ("GraphRun", "run")
