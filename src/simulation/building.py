from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional, Union

from scheduler import Direction, RequestBook, TargetSelector, get_selector, is_valid_call
from scheduler.utils import at_position

from .car import CapacityExceededError, Car
from .clock import PendingTransition, SimClock
from .config import CarConfig
from .door import DoorSequencer
from .floor import Floor
from .motion import TripCoordinator
from .passenger import Passenger, PassengerState

logger = logging.getLogger(__name__)


class Building:
    """Owns the car, its floors and every pending request.

    All mutation goes through this object: request submissions from the
    outside, and clock callbacks scheduled by the trip coordinator and the
    door sequencer.
    """

    def __init__(
        self,
        config: Optional[CarConfig] = None,
        selector_name: str = "scan",
        clock: Optional[SimClock] = None,
    ) -> None:
        self.config = config or CarConfig()
        self.config.validate()
        self.clock = clock or SimClock()
        self.transition = PendingTransition(self.clock)
        self.car = Car(
            capacity=self.config.capacity,
            current_floor=self.config.start_floor,
            position=float(self.config.start_floor),
        )
        self.floors: Dict[int, Floor] = {n: Floor(n) for n in range(1, self.config.total_floors + 1)}
        self.pressed = RequestBook()
        self.requests = RequestBook()
        self.passengers: Dict[int, Passenger] = {}
        self.selector_name = selector_name
        self.selector: TargetSelector = get_selector(selector_name)
        self.coordinator = TripCoordinator(self)
        self.sequencer = DoorSequencer(self)
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self._next_passenger_id = 1

    @property
    def num_floors(self) -> int:
        return self.config.total_floors

    def set_selector(self, name: str) -> None:
        self.selector = get_selector(name)
        self.selector_name = name

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)

    def submit_cabin_request(self, floor: int) -> bool:
        """Press a destination button inside the car. Returns True if recorded."""
        self._check_floor(floor)
        car = self.car
        if car.moving and car.active_target is not None and car.active_target.floor == floor:
            return False
        if car.idle and at_position(floor, car.position):
            return False
        if floor in self.requests.cabin_requests or not self.pressed.add_cabin_request(floor):
            return False
        logger.debug("Cabin request for floor %s", floor)
        self._on_new_request()
        return True

    def submit_hall_call(self, floor: int, direction: Union[Direction, str, int]) -> bool:
        """Press an up/down button on a floor. Returns True if recorded."""
        self._check_floor(floor)
        direction = Direction.parse(direction)
        if not is_valid_call(floor, direction, self.num_floors):
            return False
        if floor in self.requests.call_set(direction):
            return False
        if self.car.idle and at_position(floor, self.car.position):
            return False
        self.pressed.add_hall_call(floor, direction)
        logger.debug("Hall call %s at floor %s", direction.label, floor)
        self._on_new_request()
        return True

    def add_passenger(self, origin: int, destination: int) -> Passenger:
        self._check_floor(origin)
        self._check_floor(destination)
        if len(self.passengers) >= self.config.max_total_passengers:
            raise CapacityExceededError(
                f"Building already holds {len(self.passengers)} passengers"
            )
        passenger = Passenger(
            passenger_id=self._next_passenger_id,
            origin=origin,
            destination=destination,
            arrival_time=self.clock.now,
        )
        self._next_passenger_id += 1
        self.passengers[passenger.passenger_id] = passenger
        self.floors[origin].add_passenger(passenger)
        self.emit("spawn", passenger)
        self._on_new_request()
        return passenger

    def spawn_passenger(self, rng: random.Random) -> Optional[Passenger]:
        """Add a random passenger unless the building is at its passenger cap."""
        if self.at_passenger_cap():
            return None
        origin = rng.randint(1, self.num_floors)
        destination = rng.choice([f for f in self.floors if f != origin])
        return self.add_passenger(origin, destination)

    def at_passenger_cap(self) -> bool:
        return len(self.passengers) >= self.config.max_total_passengers

    def remove_passenger(self, passenger: Passenger) -> None:
        passenger.state = PassengerState.REMOVED
        self.passengers.pop(passenger.passenger_id, None)
        self.emit("removed", passenger)

    def sync_requests(self) -> None:
        """Rebuild the effective requests from pressed buttons and passengers."""
        requests = self.requests
        requests.clear()
        requests.update(self.pressed)
        requests.cabin_requests.update(p.destination for p in self.car.riders)
        for floor in self.floors.values():
            if floor.has_waiting(Direction.UP):
                requests.up_calls.add(floor.number)
            if floor.has_waiting(Direction.DOWN):
                requests.down_calls.add(floor.number)

    def snapshot(self) -> dict:
        return {
            "time": self.clock.now,
            "floors": {floor.number: len(floor) for floor in self.floors.values()},
            "car": self.car.snapshot(),
            "requests": self.requests.as_dict(),
            "passengers": [p.as_dict() for p in self.passengers.values()],
            "selector": self.selector_name,
        }

    def _on_new_request(self) -> None:
        self.sync_requests()
        if self.car.moving:
            self.coordinator.maybe_preempt(self.car.position)
        elif self.car.idle:
            self.coordinator.dispatch_next_move()

    def _check_floor(self, floor: int) -> None:
        if not 1 <= floor <= self.num_floors:
            raise ValueError(f"Floor {floor} is outside 1..{self.num_floors}")
