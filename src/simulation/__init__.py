"""Elevator state, fleet store and the dispatch controller."""

from .channel import RequestChannel
from .clock import periodic
from .config import SystemConfig
from .elevator import INITIAL_STATE, Direction, ElevatorState
from .errors import DispatchError, InvalidRequest, NoEligibleElevator, Overloaded
from .fleet import Fleet, FleetStore
from .request import PickupRequest
from .system import DeferredRequest, ElevatorSystem

__all__ = [
    "DeferredRequest",
    "Direction",
    "DispatchError",
    "ElevatorState",
    "ElevatorSystem",
    "Fleet",
    "FleetStore",
    "INITIAL_STATE",
    "InvalidRequest",
    "NoEligibleElevator",
    "Overloaded",
    "PickupRequest",
    "RequestChannel",
    "SystemConfig",
    "periodic",
]
