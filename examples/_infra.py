"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine

from reconciler.config import Settings
from reconciler.finalize import Progress
from reconciler.log import configure_logging


def settings() -> Settings:
    return Settings(_env_file=None, backend_url="http://backend.invalid")


def show_progress(progress: Progress) -> None:
    text = progress.text("en")
    if text is not None:
        print(f"   … {text}")


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    configure_logging("WARNING", json=False)
    asyncio.run(main())
