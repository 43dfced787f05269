from __future__ import annotations

import asyncio
from typing import AsyncIterator, Callable

Ticker = Callable[[float], AsyncIterator[int]]


async def periodic(period: float) -> AsyncIterator[int]:
    """Yield a tick number every ``period`` seconds, forever."""
    if period <= 0:
        raise ValueError("period must be positive")
    tick = 0
    while True:
        await asyncio.sleep(period)
        tick += 1
        yield tick
