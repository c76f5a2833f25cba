from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scheduler import Direction


class PassengerState(str, Enum):
    WAITING = "waiting"
    BOARDING = "boarding"
    RIDING = "riding"
    EXITING = "exiting"
    REMOVED = "removed"


@dataclass
class Passenger:
    """Represents a rider moving between floors."""

    passenger_id: int
    origin: int
    destination: int
    arrival_time: int = 0
    state: PassengerState = PassengerState.WAITING
    board_time: Optional[int] = None
    alight_time: Optional[int] = None

    def __post_init__(self) -> None:
        if self.origin == self.destination:
            raise ValueError(f"Passenger {self.passenger_id} is already on floor {self.origin}")

    @property
    def direction(self) -> Direction:
        return Direction.UP if self.destination > self.origin else Direction.DOWN

    def record_boarding(self, time_ms: int) -> None:
        self.state = PassengerState.BOARDING
        self.board_time = time_ms

    def record_alighting(self, time_ms: int) -> None:
        self.state = PassengerState.EXITING
        self.alight_time = time_ms

    @property
    def wait_time(self) -> Optional[int]:
        if self.board_time is None:
            return None
        return self.board_time - self.arrival_time

    @property
    def ride_time(self) -> Optional[int]:
        if self.board_time is None or self.alight_time is None:
            return None
        return self.alight_time - self.board_time

    def as_dict(self) -> dict:
        return {
            "id": self.passenger_id,
            "origin": self.origin,
            "destination": self.destination,
            "direction": self.direction.label,
            "state": self.state.value,
        }
