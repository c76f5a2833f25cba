from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from scheduler import Direction, Target

from .passenger import Passenger, PassengerState


class CapacityExceededError(RuntimeError):
    """Raised when a car or building would hold more passengers than allowed."""


class CarPhase(str, Enum):
    IDLE = "idle"
    MOVING = "moving"
    DOOR_CYCLE = "door_cycle"


@dataclass
class Car:
    """State of the single elevator car."""

    capacity: int
    current_floor: int = 1
    position: float = 1.0
    direction: Direction = Direction.IDLE
    active_target: Optional[Target] = None
    phase: CarPhase = CarPhase.IDLE
    riders: List[Passenger] = field(default_factory=list)

    @property
    def moving(self) -> bool:
        return self.phase == CarPhase.MOVING

    @property
    def door_cycle(self) -> bool:
        return self.phase == CarPhase.DOOR_CYCLE

    @property
    def idle(self) -> bool:
        return self.phase == CarPhase.IDLE

    @property
    def remaining_capacity(self) -> int:
        return self.capacity - len(self.riders)

    def can_pickup(self) -> bool:
        return len(self.riders) < self.capacity

    def board(self, passengers: List[Passenger], time_ms: int) -> None:
        if len(passengers) > self.remaining_capacity:
            raise CapacityExceededError(
                f"Boarding {len(passengers)} passengers with {self.remaining_capacity} seats left"
            )
        for passenger in passengers:
            passenger.record_boarding(time_ms)
        self.riders.extend(passengers)

    def unload(self, floor: int, time_ms: int) -> List[Passenger]:
        leaving = [p for p in self.riders if p.destination == floor]
        if leaving:
            self.riders = [p for p in self.riders if p.destination != floor]
            for passenger in leaving:
                passenger.record_alighting(time_ms)
        return leaving

    def settle_riders(self) -> None:
        for passenger in self.riders:
            if passenger.state == PassengerState.BOARDING:
                passenger.state = PassengerState.RIDING

    def arrive(self, floor: int) -> None:
        self.current_floor = floor
        self.position = float(floor)

    def snapshot(self) -> dict:
        target = self.active_target
        return {
            "current_floor": self.current_floor,
            "position": round(self.position, 4),
            "direction": self.direction.label,
            "phase": self.phase.value,
            "active_target": None
            if target is None
            else {"floor": target.floor, "source": target.source, "call_direction": target.call_direction.label},
            "passenger_count": len(self.riders),
            "capacity": self.capacity,
        }
