from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import dispatcher
from dispatcher import SearchFunction

from .channel import RequestChannel
from .clock import Ticker, periodic
from .config import SystemConfig
from .elevator import INITIAL_STATE, ElevatorState
from .errors import InvalidRequest, NoEligibleElevator
from .fleet import Fleet, FleetStore
from .request import PickupRequest

logger = logging.getLogger(__name__)


@dataclass
class DeferredRequest:
    """A request waiting for an elevator to become eligible."""

    request: PickupRequest
    since: float

    def age(self, now: float) -> float:
        return max(0.0, now - self.since)


class ElevatorSystem:
    """Dispatch controller: a stepper and an assignment consumer sharing one fleet.

    The stepper advances every elevator once per tick. The consumer takes
    requests in submission order and assigns each to the closest on-way
    elevator. A request nobody can take yet is held and retried after each
    fleet change, so it is never dropped; nothing queued behind it is
    assigned meanwhile, which lets the busy elevators drain until one fits.
    """

    def __init__(
        self,
        elevators: Iterable[ElevatorState],
        config: Optional[SystemConfig] = None,
        search: Optional[SearchFunction] = None,
        ticker: Ticker = periodic,
    ) -> None:
        fleet = tuple(elevators)
        self.config = config or SystemConfig(capacity=len(fleet) or 1)
        if len(fleet) != self.config.capacity:
            raise ValueError(f"Config expects {self.config.capacity} elevators, got {len(fleet)}")
        self.store = FleetStore(fleet, search=search or dispatcher.get_search(self.config.dispatcher))
        self.channel = RequestChannel(self.config.channel_capacity or len(fleet))
        self._ticker = ticker
        self._deferred: Optional[DeferredRequest] = None
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def initialize(cls, capacity: int, **kwargs) -> "ElevatorSystem":
        """Build ``capacity`` idle elevators parked at floor 0."""
        if capacity < 1:
            raise ValueError(f"An elevator system needs at least one elevator, got {capacity}")
        return cls([INITIAL_STATE] * capacity, **kwargs)

    @classmethod
    def from_config(cls, config: SystemConfig, ticker: Ticker = periodic) -> "ElevatorSystem":
        return cls([INITIAL_STATE] * config.capacity, config=config, ticker=ticker)

    async def query(self) -> Fleet:
        return await self.store.query()

    async def submit_request(self, request: PickupRequest) -> None:
        """Queue a request, waiting while the channel is full."""
        self._validate(request)
        await self.channel.put(request)

    def submit_request_nowait(self, request: PickupRequest) -> None:
        """Queue a request or raise Overloaded when the channel is full."""
        self._validate(request)
        self.channel.put_nowait(request)

    def request_backlog_size(self) -> int:
        """Requests accepted but not yet assigned.

        The request the consumer holds while it waits for an eligible elevator
        no longer occupies a channel slot, so the size can reach the channel
        capacity plus one.
        """
        return len(self.channel)

    def deferred(self) -> Optional[DeferredRequest]:
        return self._deferred

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self, period: Optional[float] = None) -> None:
        period = self.config.step_period if period is None else period
        logger.info("Starting %d elevators with a %.3fs step", len(self.store), period)
        tasks: List[asyncio.Task] = [
            asyncio.ensure_future(self._step_forever(period)),
            asyncio.ensure_future(self._consume_forever()),
        ]
        try:
            await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("Elevator system stopped with %d pending requests", self.request_backlog_size())

    def start(self, period: Optional[float] = None) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(period))
        return self._task

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def wait_until_quiescent(self) -> Fleet:
        """Wait for an empty backlog and an idle fleet, waking only on completions and commits."""
        while True:
            await self.channel.join()
            version = self.store.version
            fleet = self.store.snapshot
            if self.request_backlog_size():
                continue
            if self.is_quiescent(fleet):
                return fleet
            await self.store.wait_for_change(version)

    @staticmethod
    def is_quiescent(fleet: Sequence[ElevatorState]) -> bool:
        return all(elevator.is_free for elevator in fleet)

    async def _step_forever(self, period: float) -> None:
        async for tick in self._ticker(period):
            fleet = await self.store.update(dispatcher.step)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Tick %d: %s", tick, [(e.floor, sorted(e.stops)) for e in fleet])

    async def _consume_forever(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            request = await self.channel.take()
            try:
                await self.store.assign(request)
            except NoEligibleElevator:
                if self._deferred is None or self._deferred.request is not request:
                    self._deferred = DeferredRequest(request, loop.time())
                logger.warning(
                    "No elevator on the way for %s -> %s, waiting for the fleet to move",
                    request.origin,
                    request.destination,
                )
                index = await self.store.assign_when_eligible(request)
                logger.info(
                    "Deferred request %s -> %s assigned to elevator %d after %.3fs",
                    request.origin,
                    request.destination,
                    index,
                    self._deferred.age(loop.time()),
                )
            self._deferred = None
            self.channel.complete(request)

    def _validate(self, request: PickupRequest) -> None:
        for floor in (request.origin, request.destination):
            if isinstance(floor, bool) or not isinstance(floor, int):
                raise InvalidRequest(f"Floor must be an integer, got {floor!r}")
            if not self.config.floor_in_range(floor):
                raise InvalidRequest(
                    f"Floor {floor} is outside {self.config.lowest_floor}..{self.config.highest_floor}"
                )
