"""
Core types for reconciler — shared aliases.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

# ═══════════════════════════════════════════════════════════════════════════════
# Wire Shapes
# ═══════════════════════════════════════════════════════════════════════════════

type JsonObject = dict[str, Any]
"""Decoded JSON object as returned by the store API."""

type QueryParams = Mapping[str, str]
"""Gateway redirect query parameters."""

# ═══════════════════════════════════════════════════════════════════════════════
# Time
# ═══════════════════════════════════════════════════════════════════════════════

type Clock = Callable[[], datetime]
"""Injected wall clock, UTC-aware."""


def utc_now() -> datetime:
    return datetime.now(UTC)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "JsonObject",
    "QueryParams",
    "Clock",
    "utc_now",
)
