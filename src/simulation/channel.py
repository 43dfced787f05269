from __future__ import annotations

import asyncio
from typing import Optional

from .errors import Overloaded
from .request import PickupRequest


class RequestChannel:
    """Bounded FIFO of pickup requests plus the one being assigned.

    A taken request stays in the in-flight slot until ``complete`` is called.
    If the consumer is cancelled first, the next ``take`` hands the same
    request back before anything queued behind it.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("Channel capacity must be at least 1")
        self.capacity = capacity
        self._queue: "asyncio.Queue[PickupRequest]" = asyncio.Queue(maxsize=capacity)
        self._in_flight: Optional[PickupRequest] = None

    async def put(self, request: PickupRequest) -> None:
        await self._queue.put(request)

    def put_nowait(self, request: PickupRequest) -> None:
        try:
            self._queue.put_nowait(request)
        except asyncio.QueueFull:
            raise Overloaded(self.capacity) from None

    async def take(self) -> PickupRequest:
        if self._in_flight is None:
            self._in_flight = await self._queue.get()
        return self._in_flight

    def complete(self, request: PickupRequest) -> None:
        if self._in_flight is not request:
            raise RuntimeError(f"{request} is not the request in flight")
        self._in_flight = None
        self._queue.task_done()

    @property
    def in_flight(self) -> Optional[PickupRequest]:
        return self._in_flight

    async def join(self) -> None:
        """Wait until every request put so far has been completed."""
        await self._queue.join()

    def __len__(self) -> int:
        """Queued requests plus the one in flight, so at most ``capacity + 1``."""
        return self._queue.qsize() + (1 if self._in_flight is not None else 0)
