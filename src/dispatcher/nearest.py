from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .interface import E, ElevatorView, Trip


def is_candidate(elevator: ElevatorView, request: Trip) -> bool:
    return elevator.is_on_way(request.origin, request.destination)


def candidates(fleet: Sequence[ElevatorView], request: Trip) -> List[int]:
    """Indices of every elevator that can take the trip without a detour."""
    return [index for index, elevator in enumerate(fleet) if is_candidate(elevator, request)]


def search(fleet: Sequence[ElevatorView], request: Trip) -> Optional[int]:
    """Pick the on-way elevator closest to the request origin.

    Ties go to the lowest fleet index so the result is reproducible for a
    given snapshot.
    """

    eligible = candidates(fleet, request)
    if not eligible:
        return None
    return min(eligible, key=lambda index: (fleet[index].distance_from(request.origin), index))


def step(fleet: Sequence[E]) -> Tuple[E, ...]:
    """Advance every elevator by one time unit."""
    return tuple(elevator.step() for elevator in fleet)


def assign(fleet: Sequence[E], index: int, request: Trip) -> Tuple[E, ...]:
    """Return the fleet with the trip's stops added to elevator ``index``."""
    updated = list(fleet)
    updated[index] = updated[index].add_stops(request.origin, request.destination)
    return tuple(updated)
