from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, Optional, Tuple

import dispatcher
from dispatcher import SearchFunction

from .elevator import ElevatorState
from .errors import NoEligibleElevator
from .request import PickupRequest

logger = logging.getLogger(__name__)

Fleet = Tuple[ElevatorState, ...]
FleetTransform = Callable[[Fleet], Fleet]


class FleetStore:
    """The authoritative fleet, changed only by whole-fleet commits.

    Every read and write goes through one ``asyncio.Condition``. Commits that
    change the fleet bump ``version`` and wake everyone waiting for a change,
    which is how deferred assignments get retried without polling.
    """

    def __init__(self, elevators: Iterable[ElevatorState], search: Optional[SearchFunction] = None) -> None:
        self._fleet: Fleet = tuple(elevators)
        if not self._fleet:
            raise ValueError("A fleet needs at least one elevator")
        self._search = search or dispatcher.search
        self._changed = asyncio.Condition()
        self.version = 0

    def __len__(self) -> int:
        return len(self._fleet)

    @property
    def snapshot(self) -> Fleet:
        """Last committed fleet."""
        return self._fleet

    async def query(self) -> Fleet:
        async with self._changed:
            return self._fleet

    async def update(self, transform: FleetTransform) -> Fleet:
        async with self._changed:
            return self._commit(transform(self._fleet))

    async def assign(self, request: PickupRequest) -> int:
        """Search and commit in one step; raise NoEligibleElevator if nobody fits."""
        async with self._changed:
            return self._assign_locked(request)

    async def assign_when_eligible(self, request: PickupRequest) -> int:
        """Retry the assignment after every fleet change until it succeeds."""
        async with self._changed:
            while True:
                try:
                    return self._assign_locked(request)
                except NoEligibleElevator:
                    await self._changed.wait()

    async def wait_for_change(self, version: int) -> Fleet:
        async with self._changed:
            await self._changed.wait_for(lambda: self.version > version)
            return self._fleet

    def _assign_locked(self, request: PickupRequest) -> int:
        index = self._search(self._fleet, request)
        if index is None:
            raise NoEligibleElevator(request)
        self._commit(dispatcher.assign(self._fleet, index, request))
        logger.debug("Assigned %s -> %s to elevator %d", request.origin, request.destination, index)
        return index

    def _commit(self, fleet: Fleet) -> Fleet:
        fleet = tuple(fleet)
        if len(fleet) != len(self._fleet):
            raise ValueError(f"Fleet size is fixed at {len(self._fleet)}, got {len(fleet)}")
        if fleet != self._fleet:
            self._fleet = fleet
            self.version += 1
            self._changed.notify_all()
        return self._fleet
