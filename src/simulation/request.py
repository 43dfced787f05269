from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PickupRequest:
    """A rider asking to travel from one floor to another."""

    origin: int
    destination: int

    @property
    def direction(self) -> int:
        """Return +1 for up, -1 for down and 0 for a trivial trip."""
        if self.destination > self.origin:
            return 1
        if self.destination < self.origin:
            return -1
        return 0

    @property
    def is_trivial(self) -> bool:
        return self.origin == self.destination

    def to_dict(self) -> dict:
        return {"origin": self.origin, "destination": self.destination}
