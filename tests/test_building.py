from __future__ import annotations

import random

import pytest

from scheduler import CabinTarget, Direction, HallTarget
from simulation import Building, CapacityExceededError, CarConfig, CarPhase, PassengerState


def record(building: Building, event: str) -> list:
    events: list = []
    building.on_event(event, events.append)
    return events


def stop_floors(building: Building) -> list:
    stops: list = []
    building.on_event("stop", lambda payload: stops.append(payload["floor"]))
    return stops


class TestRequestSubmission:
    def test_cabin_request_from_idle_dispatches_immediately(self):
        building = Building()
        assert building.submit_cabin_request(5)
        car = building.car
        assert car.active_target == CabinTarget(5)
        assert car.phase == CarPhase.MOVING
        assert car.direction == Direction.UP

    def test_duplicate_requests_leave_collections_unchanged(self):
        building = Building()
        assert building.submit_cabin_request(7)
        assert building.submit_hall_call(4, "down")
        before = building.requests.as_dict()
        assert not building.submit_cabin_request(7)
        assert not building.submit_hall_call(4, Direction.DOWN)
        assert building.requests.as_dict() == before

    @pytest.mark.parametrize("total_floors", [2, 6, 10])
    def test_boundary_hall_calls_are_ignored(self, total_floors):
        building = Building(CarConfig(total_floors=total_floors, start_floor=2))
        assert not building.submit_hall_call(1, Direction.DOWN)
        assert not building.submit_hall_call(total_floors, Direction.UP)
        assert not building.requests.has_any_requests()
        assert building.car.idle

    def test_requests_at_resting_floor_are_ignored_while_idle(self):
        building = Building()
        assert not building.submit_cabin_request(1)
        assert not building.submit_hall_call(1, "up")
        assert building.car.idle

    def test_request_for_current_trip_target_is_ignored(self):
        building = Building()
        building.submit_cabin_request(5)
        assert not building.submit_cabin_request(5)

    def test_out_of_range_floor_raises(self):
        building = Building()
        with pytest.raises(ValueError):
            building.submit_cabin_request(11)
        with pytest.raises(ValueError):
            building.submit_hall_call(0, "up")

    def test_request_during_door_cycle_is_only_recorded(self):
        building = Building()
        building.submit_cabin_request(3)
        while not building.car.door_cycle:
            building.clock.advance(16)
        assert building.submit_cabin_request(8)
        assert building.car.door_cycle
        assert building.car.active_target == CabinTarget(3)
        assert building.requests.cabin_requests == {8}


class TestTrips:
    def test_trip_ends_idle_at_target(self):
        building = Building()
        building.submit_cabin_request(5)
        building.clock.run_until_idle()
        car = building.car
        assert car.current_floor == 5
        assert car.position == 5.0
        assert car.phase == CarPhase.IDLE
        assert car.direction == Direction.IDLE
        assert car.active_target is None
        assert not building.requests.has_any_requests()

    def test_position_stays_in_building_and_moves_monotonically(self):
        building = Building()
        building.submit_cabin_request(10)
        positions = []
        while building.car.moving:
            building.clock.advance(16)
            positions.append(building.car.position)
        assert positions == sorted(positions)
        assert all(1.0 <= p <= 10.0 for p in positions)
        assert positions[-1] == 10.0

    def test_short_trips_take_at_least_the_minimum_time(self):
        building = Building()
        assert building.coordinator.trip_duration(0.1) == building.config.min_trip_ms
        assert building.coordinator.trip_duration(0.9) == 1000

    def test_preemption_for_stop_on_the_way(self):
        building = Building(CarConfig(start_floor=3))
        building.submit_cabin_request(8)
        building.coordinator.on_tick(4.0)
        preempts = record(building, "preempt")
        assert building.submit_cabin_request(6)
        car = building.car
        assert car.active_target == CabinTarget(6)
        assert car.direction == Direction.UP
        assert car.moving
        assert preempts == [{"from": 8, "to": 6, "position": 4.0}]

    def test_on_tick_reports_preemption(self):
        building = Building(CarConfig(start_floor=3))
        building.submit_cabin_request(8)
        building.pressed.add_cabin_request(6)
        building.sync_requests()
        assert building.coordinator.on_tick(4.0) is True
        assert building.coordinator.on_tick(4.5) is False

    def test_call_behind_the_car_does_not_preempt(self):
        building = Building(CarConfig(start_floor=3))
        building.submit_cabin_request(8)
        building.coordinator.on_tick(4.0)
        assert building.submit_hall_call(2, "down")
        assert building.car.active_target == CabinTarget(8)
        assert 2 in building.requests.down_calls

    def test_call_beyond_the_target_does_not_preempt(self):
        building = Building(CarConfig(start_floor=3))
        building.submit_cabin_request(6)
        building.coordinator.on_tick(4.0)
        building.submit_cabin_request(9)
        assert building.car.active_target == CabinTarget(6)

    def test_stops_are_served_in_sweep_order(self):
        building = Building()
        stops = stop_floors(building)
        building.submit_hall_call(6, "down")
        building.submit_cabin_request(9)
        building.submit_cabin_request(7)
        building.submit_cabin_request(4)
        building.clock.run_until_idle()
        assert stops == [4, 7, 9, 6]

    def test_zero_distance_target_goes_straight_to_door_cycle(self):
        building = Building()
        building.coordinator.start_move_to(HallTarget(1, Direction.UP))
        assert building.car.door_cycle
        assert building.car.active_target == HallTarget(1, Direction.UP)

    def test_preempted_trip_stops_at_new_target_first(self):
        building = Building(CarConfig(start_floor=3))
        stops = stop_floors(building)
        building.submit_cabin_request(8)
        building.clock.advance(400)
        assert building.submit_cabin_request(7)
        assert building.car.active_target == CabinTarget(7)
        building.clock.run_until_idle()
        assert stops == [7, 8]
        assert building.car.current_floor == 8
        assert building.car.idle


class TestPassengers:
    def test_both_hall_calls_at_one_floor_are_kept(self):
        building = Building()
        assert building.submit_hall_call(5, "up")
        assert building.submit_hall_call(5, "down")
        assert building.car.active_target == HallTarget(5, Direction.UP)
        assert building.requests.up_calls == {5}
        assert building.requests.down_calls == {5}

    def test_up_waiters_board_first_and_down_waiters_wait(self):
        building = Building()
        stops = stop_floors(building)
        boarded = record(building, "board")
        going_up = building.add_passenger(5, 8)
        going_down = building.add_passenger(5, 2)
        assert building.car.active_target == HallTarget(5, Direction.UP)

        building.clock.run_until_idle()
        assert stops == [5, 8, 5, 2]
        assert boarded == [going_up, going_down]
        assert going_up.state == PassengerState.REMOVED
        assert building.passengers == {}

    def test_full_car_skips_pickup_only_floors(self):
        building = Building(CarConfig(capacity=1))
        stops = stop_floors(building)
        building.add_passenger(1, 9)
        building.add_passenger(5, 2)
        assert building.car.door_cycle

        building.clock.advance(940)
        assert len(building.car.riders) == 1
        assert building.car.active_target == CabinTarget(9)

        building.clock.run_until_idle()
        assert stops == [1, 9, 5, 2]
        assert building.passengers == {}

    def test_boarding_never_exceeds_capacity(self):
        building = Building(CarConfig(capacity=2, max_total_passengers=5))
        loads = []
        building.on_event("board", lambda _: loads.append(len(building.car.riders)))
        for destination in (6, 7, 8, 9):
            building.add_passenger(3, destination)
        building.clock.run_until_idle()
        assert loads
        assert max(loads) <= 2
        assert building.passengers == {}

    def test_passenger_cap_is_enforced(self):
        building = Building(CarConfig(max_total_passengers=2))
        building.add_passenger(4, 6)
        building.add_passenger(4, 7)
        with pytest.raises(CapacityExceededError):
            building.add_passenger(4, 8)

    def test_spawn_returns_none_at_cap(self):
        building = Building(CarConfig(max_total_passengers=1))
        rng = random.Random(1)
        assert building.spawn_passenger(rng) is not None
        assert building.spawn_passenger(rng) is None
        assert len(building.passengers) == 1

    def test_car_refuses_to_board_past_capacity(self):
        building = Building(CarConfig(capacity=1))
        first = building.add_passenger(4, 6)
        second = building.add_passenger(4, 7)
        with pytest.raises(CapacityExceededError):
            building.car.board([first, second], 0)

    def test_snapshot_reports_state(self):
        building = Building()
        building.add_passenger(3, 6)
        snapshot = building.snapshot()
        assert snapshot["car"]["active_target"] == {"floor": 3, "source": "hall", "call_direction": "up"}
        assert snapshot["floors"][3] == 1
        assert snapshot["requests"]["up"] == [3]
        assert snapshot["passengers"][0]["state"] == "waiting"
