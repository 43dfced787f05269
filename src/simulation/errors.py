from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .request import PickupRequest


class DispatchError(Exception):
    """Base class for dispatch failures."""


class NoEligibleElevator(DispatchError):
    """No elevator can take the request right now; the consumer retries it."""

    def __init__(self, request: "PickupRequest") -> None:
        super().__init__(f"No elevator is on the way for {request.origin} -> {request.destination}")
        self.request = request


class Overloaded(DispatchError):
    """The request channel is full."""

    def __init__(self, capacity: int) -> None:
        super().__init__(f"Request channel is full ({capacity} pending)")
        self.capacity = capacity


class InvalidRequest(DispatchError, ValueError):
    """The request names a floor the system cannot serve."""
