"""Single-car elevator simulation primitives."""

from .building import Building
from .car import CapacityExceededError, Car, CarPhase
from .clock import PendingTransition, SimClock, TimerHandle
from .config import CarConfig
from .floor import Floor
from .passenger import Passenger, PassengerState
from .simulation import MetricsSnapshot, MetricsTracker, Simulation

__all__ = [
    "Building",
    "CapacityExceededError",
    "Car",
    "CarConfig",
    "CarPhase",
    "Floor",
    "MetricsSnapshot",
    "MetricsTracker",
    "Passenger",
    "PassengerState",
    "PendingTransition",
    "SimClock",
    "Simulation",
    "TimerHandle",
]
