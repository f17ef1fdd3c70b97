"""Shared test doubles."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

FIXED_NOW = datetime(2026, 1, 1, tzinfo=UTC)
FIXED_NOW_MS = 1_767_225_600_000


class GatedSleep:
    """Awaitable sleep that blocks until the test opens the gate."""

    def __init__(self) -> None:
        self.calls: list[float] = []
        self.gate = asyncio.Event()

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)
        await self.gate.wait()


async def no_sleep(_delay: float) -> None:
    return None
