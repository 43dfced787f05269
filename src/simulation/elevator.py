from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Iterable, Optional


class Direction(Enum):
    """Leg an elevator is committed to."""

    IDLE = 0
    UP = 1
    DOWN = -1


def _settle(floor: int, stops: FrozenSet[int], preferred: Optional[Direction]) -> Direction:
    """Pick the direction for a floor/stops pair, keeping `preferred` while it has stops ahead."""
    above = any(stop > floor for stop in stops)
    below = any(stop < floor for stop in stops)
    if preferred is Direction.UP and above:
        return Direction.UP
    if preferred is Direction.DOWN and below:
        return Direction.DOWN
    if above and not below:
        return Direction.UP
    if below and not above:
        return Direction.DOWN
    if not above and not below:
        return Direction.IDLE
    raise ValueError(
        f"Elevator at floor {floor} has stops on both sides {sorted(stops)} without a committed direction"
    )


@dataclass(frozen=True)
class ElevatorState:
    """Immutable snapshot of one elevator: where it is and where it still has to go.

    ``direction`` is the committed leg. It is derived from the stops when not
    given, which is the usual way to build a state by hand. A free elevator
    that accepts a pickup behind a delivery commits toward the pickup first
    and records it as ``turn``. Until the turn is reached, floors passed on
    the way are not served, so a delivery lying between the elevator and the
    pickup is kept for the way back.
    """

    floor: int
    stops: FrozenSet[int] = field(default_factory=frozenset)
    direction: Optional[Direction] = None
    turn: Optional[int] = None

    def __post_init__(self) -> None:
        stops = frozenset(self.stops)
        object.__setattr__(self, "stops", stops)
        if self.turn is None:
            direction = _settle(self.floor, stops, self.direction)
        elif self.turn == self.floor or self.turn not in stops:
            raise ValueError(f"Turn {self.turn} must be a pending stop away from floor {self.floor}")
        else:
            direction = Direction.UP if self.turn > self.floor else Direction.DOWN
        object.__setattr__(self, "direction", direction)

    @property
    def is_free(self) -> bool:
        return not self.stops

    @property
    def is_going_up(self) -> bool:
        return (
            self.turn is None
            and self.direction is Direction.UP
            and all(stop > self.floor for stop in self.stops)
        )

    @property
    def is_going_down(self) -> bool:
        return (
            self.turn is None
            and self.direction is Direction.DOWN
            and all(stop < self.floor for stop in self.stops)
        )

    @property
    def is_stationary(self) -> bool:
        """Nothing to do but the floor it is already on."""
        return all(stop == self.floor for stop in self.stops)

    @property
    def is_reversing(self) -> bool:
        """True while running a pickup leg that points away from the delivery."""
        return not (self.is_stationary or self.is_going_up or self.is_going_down)

    def distance_from(self, floor: int) -> int:
        return abs(self.floor - floor)

    def is_on_way(self, origin: int, destination: int) -> bool:
        """Check whether the trip fits the current leg without a detour."""
        if self.is_stationary:
            return True
        if self.is_going_up:
            return self.floor <= origin < destination
        if self.is_going_down:
            return destination < origin <= self.floor
        return False

    def add_stop(self, stop: int) -> "ElevatorState":
        if stop == self.floor:
            return self
        preferred = None if self.is_stationary else self.direction
        return ElevatorState(self.floor, self.stops | {stop}, preferred, self.turn)

    def add_stops(self, origin: int, destination: int) -> "ElevatorState":
        if self.is_free and origin != self.floor and (origin - self.floor) * (destination - origin) < 0:
            return ElevatorState(self.floor, frozenset({origin, destination}), turn=origin)
        return self.add_stop(origin).add_stop(destination)

    def step(self) -> "ElevatorState":
        if self.is_stationary:
            return self if self.is_free else replace(self, stops=frozenset())
        floor = self.floor + self.direction.value
        if self.turn is None:
            # Keeping the direction as the preference flips it once nothing is left ahead.
            return replace(self, floor=floor, stops=self.stops - {floor})
        if floor != self.turn:
            return replace(self, floor=floor)
        back = Direction.DOWN if self.direction is Direction.UP else Direction.UP
        return ElevatorState(floor, self.stops - {floor}, back)

    def steps_to_idle(self) -> int:
        """Number of steps until the elevator has served every stop."""
        if self.is_stationary:
            return 0 if self.is_free else 1
        if self.turn is not None:
            rest = self.stops - {self.turn}
            return abs(self.turn - self.floor) + max((abs(self.turn - s) for s in rest), default=0)
        if self.is_going_up:
            return max(self.stops) - self.floor
        if self.is_going_down:
            return self.floor - min(self.stops)
        if self.direction is Direction.UP:
            turn = max(self.stops)
            return (turn - self.floor) + (turn - min(self.stops))
        turn = min(self.stops)
        return (self.floor - turn) + (max(self.stops) - turn)

    @classmethod
    def of(cls, floor: int, stops: Iterable[int] = ()) -> "ElevatorState":
        return cls(floor, frozenset(stops))

    def to_dict(self) -> dict:
        return {
            "floor": self.floor,
            "stops": sorted(self.stops),
            "direction": self.direction.name.lower(),
            "turn": self.turn,
        }


INITIAL_STATE = ElevatorState(0)
