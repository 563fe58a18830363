"""
Cart reference store — typed key-value protocol.

The stored cart reference is the single cart id written before the gateway
redirect and read back on return. All methods return Result for explicit
error handling.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Protocol

from kungfu import Result, Ok, Error

from reconciler.errors import StoreError


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol — Result-based
# ═══════════════════════════════════════════════════════════════════════════════


class CartReferenceStore(Protocol):
    """
    Key-value store for client-side cart identifiers.

    Example — Redis implementation:

        class RedisCartStore:
            def __init__(self, redis: Redis, client_id: str):
                self.redis = redis
                self.prefix = f"cart-ref:{client_id}:"

            async def get(self, key: str) -> Result[str | None, StoreError]:
                try:
                    return Ok(await self.redis.get(self.prefix + key))
                except RedisError as e:
                    return Error(StoreError("Failed to get", e))

            # ... set / delete
    """

    async def get(self, key: str) -> Result[str | None, StoreError]:
        """Get value. Returns Ok(None) if not found."""
        ...

    async def set(self, key: str, value: str) -> Result[None, StoreError]:
        """Store value, replacing any previous one."""
        ...

    async def delete(self, key: str) -> Result[bool, StoreError]:
        """Delete key. Returns Ok(True) if existed."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class MemoryCartStore:
    """
    In-memory store for testing.

    fail_on: keys whose operations return StoreError, to exercise the
    best-effort cleanup paths.
    """

    data: dict[str, str] = field(default_factory=dict)
    fail_on: frozenset[str] = frozenset()
    deletes: list[str] = field(default_factory=list)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def get(self, key: str) -> Result[str | None, StoreError]:
        if key in self.fail_on:
            return Error(StoreError(f"get {key} failed"))
        async with self._lock:
            return Ok(self.data.get(key))

    async def set(self, key: str, value: str) -> Result[None, StoreError]:
        if key in self.fail_on:
            return Error(StoreError(f"set {key} failed"))
        async with self._lock:
            self.data[key] = value
            return Ok(None)

    async def delete(self, key: str) -> Result[bool, StoreError]:
        if key in self.fail_on:
            return Error(StoreError(f"delete {key} failed"))
        async with self._lock:
            self.deletes.append(key)
            return Ok(self.data.pop(key, None) is not None)


__all__ = (
    "CartReferenceStore",
    "MemoryCartStore",
)
