from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List

from scheduler import Direction

from .passenger import Passenger


@dataclass
class Floor:
    """Represents a floor with directional queues."""

    number: int
    up_queue: Deque[Passenger] = field(default_factory=deque)
    down_queue: Deque[Passenger] = field(default_factory=deque)

    def add_passenger(self, passenger: Passenger) -> None:
        if passenger.direction == Direction.UP:
            self.up_queue.append(passenger)
        else:
            self.down_queue.append(passenger)

    def has_waiting(self, direction: Direction = Direction.IDLE) -> bool:
        if direction == Direction.UP:
            return bool(self.up_queue)
        if direction == Direction.DOWN:
            return bool(self.down_queue)
        return bool(self.up_queue or self.down_queue)

    def waiting(self) -> List[Passenger]:
        """All waiting passengers, earliest arrival first."""
        return sorted([*self.up_queue, *self.down_queue], key=lambda p: p.passenger_id)

    def board_passengers(self, direction: Direction, capacity: int) -> List[Passenger]:
        queue = self.up_queue if direction == Direction.UP else self.down_queue
        boarded: List[Passenger] = []
        while queue and len(boarded) < capacity:
            boarded.append(queue.popleft())
        return boarded

    def __len__(self) -> int:
        return len(self.up_queue) + len(self.down_queue)
