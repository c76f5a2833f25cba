"""Which waiting passengers may board at a stop."""
from __future__ import annotations

from typing import Iterable, List, Optional

from scheduler import Direction, RequestBook, Target

from .passenger import Passenger


def determine_board_direction(
    car_direction: Direction,
    active_target: Optional[Target],
    floor: int,
    waiting: Iterable[Passenger],
    requests: RequestBook,
) -> Direction:
    """Pick the direction of waiters allowed to board at ``floor``.

    A moving car takes riders going its way. Riders for the opposite
    direction may board only when nothing pulls the car further on, since
    the car is about to reverse. An idle car honors the hall call it was
    sent for, then defaults to up.
    """

    waiting = list(waiting)
    has_up = any(p.direction == Direction.UP for p in waiting)
    has_down = any(p.direction == Direction.DOWN for p in waiting)
    if not has_up and not has_down:
        return Direction.IDLE

    if car_direction != Direction.IDLE:
        opposite = Direction(-car_direction)
        has_same = has_up if car_direction == Direction.UP else has_down
        has_opposite = has_down if car_direction == Direction.UP else has_up
        if has_same:
            return car_direction
        if has_opposite and not requests.has_requests_beyond(floor, car_direction):
            return opposite
        return Direction.IDLE

    if active_target is not None and active_target.source == "hall":
        if active_target.call_direction == Direction.UP and has_up:
            return Direction.UP
        if active_target.call_direction == Direction.DOWN and has_down:
            return Direction.DOWN

    if has_down and not has_up:
        return Direction.DOWN
    return Direction.UP


def select_boarders(
    waiting: Iterable[Passenger], direction: Direction, remaining_capacity: int
) -> List[Passenger]:
    """Earliest-queued passengers heading ``direction``, up to the free seats."""
    if remaining_capacity <= 0 or direction == Direction.IDLE:
        return []
    selected: List[Passenger] = []
    for passenger in waiting:
        if len(selected) >= remaining_capacity:
            break
        if passenger.direction == direction:
            selected.append(passenger)
    return selected


def has_serviceable_request_at_floor(
    requests: RequestBook,
    car_direction: Direction,
    floor: int,
    can_pickup: bool,
) -> bool:
    """Whether opening the doors at ``floor`` right now would do useful work."""
    if floor in requests.cabin_requests:
        return True
    if not can_pickup:
        return False

    has_up = floor in requests.up_calls
    has_down = floor in requests.down_calls
    if car_direction == Direction.IDLE:
        return has_up or has_down

    has_same = has_up if car_direction == Direction.UP else has_down
    has_opposite = has_down if car_direction == Direction.UP else has_up
    if has_same:
        return True
    return has_opposite and not requests.has_requests_beyond(floor, car_direction)
