from __future__ import annotations

from scheduler import CabinTarget, Direction, HallTarget, RequestBook
from simulation.boarding import (
    determine_board_direction,
    has_serviceable_request_at_floor,
    select_boarders,
)
from simulation.passenger import Passenger


def rider(pid: int, origin: int, destination: int) -> Passenger:
    return Passenger(passenger_id=pid, origin=origin, destination=destination)


def test_moving_car_boards_its_own_direction():
    waiting = [rider(1, 5, 2), rider(2, 5, 9)]
    requests = RequestBook(cabin_requests={8})
    assert determine_board_direction(Direction.UP, CabinTarget(5), 5, waiting, requests) == Direction.UP


def test_opposite_direction_boards_only_when_turning_around():
    waiting = [rider(1, 5, 2)]
    pulled_up = RequestBook(cabin_requests={8}, down_calls={5})
    at_top = RequestBook(down_calls={5})
    assert determine_board_direction(Direction.UP, None, 5, waiting, pulled_up) == Direction.IDLE
    assert determine_board_direction(Direction.UP, None, 5, waiting, at_top) == Direction.DOWN


def test_moving_down_mirrors_up():
    waiting = [rider(1, 5, 9)]
    assert determine_board_direction(
        Direction.DOWN, None, 5, waiting, RequestBook(cabin_requests={2})
    ) == Direction.IDLE
    assert determine_board_direction(Direction.DOWN, None, 5, waiting, RequestBook()) == Direction.UP


def test_idle_car_honors_targeted_hall_call():
    waiting = [rider(1, 5, 9), rider(2, 5, 1)]
    target = HallTarget(5, Direction.DOWN)
    assert determine_board_direction(Direction.IDLE, target, 5, waiting, RequestBook()) == Direction.DOWN


def test_idle_car_defaults_to_up_then_to_whatever_waits():
    both = [rider(1, 5, 1), rider(2, 5, 9)]
    only_down = [rider(3, 5, 1)]
    assert determine_board_direction(Direction.IDLE, None, 5, both, RequestBook()) == Direction.UP
    assert determine_board_direction(Direction.IDLE, None, 5, only_down, RequestBook()) == Direction.DOWN
    assert determine_board_direction(Direction.IDLE, None, 5, [], RequestBook()) == Direction.IDLE


def test_select_boarders_respects_queue_order_and_capacity():
    waiting = [rider(1, 3, 7), rider(2, 3, 1), rider(3, 3, 8), rider(4, 3, 9)]
    chosen = select_boarders(waiting, Direction.UP, 2)
    assert [p.passenger_id for p in chosen] == [1, 3]


def test_select_boarders_with_no_room_boards_nobody():
    waiting = [rider(1, 3, 7)]
    assert select_boarders(waiting, Direction.UP, 0) == []
    assert select_boarders(waiting, Direction.UP, -1) == []
    assert select_boarders(waiting, Direction.IDLE, 4) == []


def test_serviceable_floor_rules():
    requests = RequestBook(cabin_requests={9}, down_calls={4})
    assert not has_serviceable_request_at_floor(requests, Direction.UP, 4, True)
    assert has_serviceable_request_at_floor(requests, Direction.IDLE, 4, True)
    assert not has_serviceable_request_at_floor(requests, Direction.IDLE, 4, False)
    assert has_serviceable_request_at_floor(RequestBook(cabin_requests={4}), Direction.UP, 4, False)
    assert has_serviceable_request_at_floor(RequestBook(down_calls={4}), Direction.UP, 4, True)
