from __future__ import annotations

from typing import Optional, Protocol, Sequence, TypeVar


class Trip(Protocol):
    """Anything carrying an origin and a destination floor."""

    origin: int
    destination: int


class ElevatorView(Protocol):
    """What the dispatcher needs to know about one elevator."""

    floor: int

    def is_on_way(self, origin: int, destination: int) -> bool:
        ...

    def distance_from(self, floor: int) -> int:
        ...

    def step(self) -> "ElevatorView":
        ...

    def add_stops(self, origin: int, destination: int) -> "ElevatorView":
        ...


E = TypeVar("E", bound=ElevatorView)


class SearchFunction(Protocol):
    """Strategy interface for choosing the elevator that serves a trip."""

    def __call__(self, fleet: Sequence[ElevatorView], request: Trip) -> Optional[int]:
        """
        Return the fleet index of the chosen elevator, or None.

        Implementations must be pure: the same snapshot and request always
        give the same answer and nothing is mutated.
        """
        ...
