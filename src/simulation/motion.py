from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from scheduler import Direction, Target, same_target
from scheduler.utils import at_position, direction_between, is_above, is_below

from .boarding import has_serviceable_request_at_floor
from .car import CarPhase

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .building import Building

logger = logging.getLogger(__name__)


def ease_out_cubic(t: float) -> float:
    t = min(max(t, 0.0), 1.0)
    return 1 - (1 - t) ** 3


@dataclass(frozen=True)
class Trip:
    """One continuous move of the car toward a target floor."""

    target: Target
    start_position: float
    started_at: int
    duration_ms: int

    def progress(self, now: int) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return min((now - self.started_at) / self.duration_ms, 1.0)

    def position_at(self, now: int) -> float:
        eased = ease_out_cubic(self.progress(now))
        return self.start_position + (self.target.floor - self.start_position) * eased


class TripCoordinator:
    """Drives the car between IDLE, MOVING and the door cycle."""

    def __init__(self, building: "Building") -> None:
        self.building = building
        self.trip: Optional[Trip] = None

    def trip_duration(self, distance: float) -> int:
        config = self.building.config
        return int(max(config.min_trip_ms, distance / config.speed_floors_per_sec * 1000))

    def dispatch_next_move(self) -> None:
        building = self.building
        car = building.car
        if car.moving or car.door_cycle:
            return

        building.sync_requests()
        floor_here = round(car.position)
        if has_serviceable_request_at_floor(
            building.requests, car.direction, floor_here, car.can_pickup()
        ):
            car.active_target = building.requests.build_target_for_floor(floor_here, car.direction)
            logger.debug("Servicing floor %s without moving", floor_here)
            building.sequencer.begin_stop(floor_here)
            return

        target = building.selector.choose_next_target(
            building.requests, car.position, car.direction, car.can_pickup()
        )
        if target is None:
            car.direction = Direction.IDLE
            car.active_target = None
            building.emit("idle", car.snapshot())
            return
        self.start_move_to(target)

    def start_move_to(self, target: Target) -> None:
        building = self.building
        car = building.car
        building.transition.cancel()

        start = car.position
        if at_position(target.floor, start):
            car.active_target = target
            self.trip = None
            building.sequencer.begin_stop(round(start))
            return

        car.active_target = target
        car.phase = CarPhase.MOVING
        car.direction = direction_between(start, target.floor)
        self.trip = Trip(
            target=target,
            start_position=start,
            started_at=building.clock.now,
            duration_ms=self.trip_duration(abs(target.floor - start)),
        )
        logger.debug(
            "Moving %s from %.3f to %s (%s ms)",
            car.direction.label,
            start,
            target,
            self.trip.duration_ms,
        )
        building.emit("depart", car.snapshot())
        self._schedule_frame()

    def _schedule_frame(self) -> None:
        self.building.transition.schedule(self.building.config.frame_interval_ms, self._frame)

    def _frame(self) -> None:
        trip = self.trip
        if trip is None:
            return
        now = self.building.clock.now
        preempted = self.on_tick(trip.position_at(now))
        if preempted or not self.building.car.moving:
            return
        if trip.progress(now) < 1.0:
            self._schedule_frame()
            return
        self.on_arrival(trip.target.floor)

    def on_tick(self, position: float) -> bool:
        """Record the car's position for this frame; return True if retargeted."""
        self.building.car.position = position
        return self.maybe_preempt(position)

    def maybe_preempt(self, position: float) -> bool:
        building = self.building
        car = building.car
        active = car.active_target
        if not car.moving or active is None or car.direction == Direction.IDLE:
            return False

        candidate = building.selector.choose_next_target(
            building.requests, position, car.direction, car.can_pickup()
        )
        if candidate is None or same_target(candidate, active):
            return False

        if car.direction == Direction.UP:
            on_the_way = is_above(candidate.floor, position) and is_below(candidate.floor, active.floor)
        else:
            on_the_way = is_below(candidate.floor, position) and is_above(candidate.floor, active.floor)
        if not on_the_way:
            return False

        logger.debug("Preempting trip to %s for %s at %.3f", active, candidate, position)
        building.emit("preempt", {"from": active.floor, "to": candidate.floor, "position": position})
        self.start_move_to(candidate)
        return True

    def on_arrival(self, floor: int) -> None:
        building = self.building
        building.transition.cancel()
        self.trip = None
        building.car.arrive(floor)
        building.sequencer.begin_stop(floor)
