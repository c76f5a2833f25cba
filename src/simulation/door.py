from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from scheduler import Direction

from .boarding import determine_board_direction, select_boarders
from .car import CarPhase
from .passenger import Passenger

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .building import Building

logger = logging.getLogger(__name__)


class DoorSequencer:
    """Runs the unload -> board -> hold -> close cycle at a stop.

    Each phase is scheduled on the car's single pending-transition slot, so
    nothing else can move the car until ``on_sequence_complete`` fires.
    """

    def __init__(self, building: "Building") -> None:
        self.building = building
        self._exiting: List[Passenger] = []

    def begin_stop(self, floor: int) -> None:
        building = self.building
        car = building.car
        if car.door_cycle:
            return

        car.phase = CarPhase.DOOR_CYCLE
        car.arrive(floor)
        # One stop answers every button pressed for this floor
        building.pressed.clear_floor(floor)
        building.emit("stop", {"floor": floor, "time": building.clock.now})
        logger.debug("Doors opening at floor %s", floor)

        unload_duration = self._unload(floor)
        building.transition.schedule(
            max(building.config.door_open_ms, unload_duration), lambda: self._board_phase(floor)
        )

    def _unload(self, floor: int) -> int:
        building = self.building
        leaving = building.car.unload(floor, building.clock.now)
        building.sync_requests()
        if not leaving:
            return 0
        self._exiting.extend(leaving)
        for passenger in leaving:
            building.emit("alight", passenger)
        config = building.config
        return len(leaving) * config.exit_stagger_ms + config.exit_duration_ms

    def _board_phase(self, floor: int) -> None:
        building = self.building
        exiting, self._exiting = self._exiting, []
        for passenger in exiting:
            building.remove_passenger(passenger)

        board_duration = self._board(floor)
        building.transition.schedule(
            max(building.config.floor_dwell_ms, board_duration), self._close_phase
        )

    def _board(self, floor_number: int) -> int:
        building = self.building
        car = building.car
        config = building.config
        floor = building.floors[floor_number]
        waiting = floor.waiting()
        if not waiting:
            return 0

        remaining = car.remaining_capacity
        if remaining <= 0:
            return config.board_full_ms

        direction = determine_board_direction(
            car.direction, car.active_target, floor_number, waiting, building.requests
        )
        if direction == Direction.IDLE:
            return config.board_blocked_ms

        selected = select_boarders(waiting, direction, remaining)
        if not selected:
            return config.board_empty_ms

        boarded = floor.board_passengers(direction, len(selected))
        car.board(boarded, building.clock.now)
        if car.direction == Direction.IDLE:
            car.direction = boarded[0].direction
        building.sync_requests()
        for passenger in boarded:
            building.emit("board", passenger)
        logger.debug("%s passengers boarded %s at floor %s", len(boarded), direction.label, floor_number)
        return len(boarded) * config.board_stagger_ms + config.board_settle_ms

    def _close_phase(self) -> None:
        self.building.car.settle_riders()
        self.building.transition.schedule(self.building.config.door_close_ms, self.on_sequence_complete)

    def on_sequence_complete(self) -> None:
        building = self.building
        car = building.car
        building.transition.cancel()
        car.phase = CarPhase.IDLE
        car.active_target = None
        building.sync_requests()
        building.emit("doors_closed", car.snapshot())
        building.coordinator.dispatch_next_move()
