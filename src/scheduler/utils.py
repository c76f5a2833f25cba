from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional

from .interface import Direction, Target

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .requests import RequestBook

FLOOR_EPSILON = 0.001


def is_above(floor: float, position: float) -> bool:
    return floor > position + FLOOR_EPSILON


def is_below(floor: float, position: float) -> bool:
    return floor < position - FLOOR_EPSILON


def at_position(floor: float, position: float) -> bool:
    return abs(floor - position) <= FLOOR_EPSILON


def direction_between(position: float, floor: float) -> Direction:
    """Direction the car would travel from ``position`` to reach ``floor``."""
    if is_above(floor, position):
        return Direction.UP
    if is_below(floor, position):
        return Direction.DOWN
    return Direction.IDLE


def floors_above(floors: Iterable[int], position: float) -> List[int]:
    return sorted(floor for floor in floors if is_above(floor, position))


def floors_below(floors: Iterable[int], position: float) -> List[int]:
    return sorted(floor for floor in floors if is_below(floor, position))


def same_target(a: Optional[Target], b: Optional[Target]) -> bool:
    if a is None or b is None:
        return False
    return a == b


def nearest_target(
    requests: "RequestBook", position: float, capacity_available: bool = True
) -> Optional[Target]:
    """Pick the pending floor closest to ``position``.

    Floors are scanned in ascending order so the lower floor wins a tie.
    A floor sitting at the car's position is only chosen when it is the
    only candidate left.
    """

    visible = requests if capacity_available else requests.without_hall_calls()
    floors = visible.floors()
    if not floors:
        return None

    nearest: Optional[int] = None
    nearest_distance = float("inf")
    for floor in floors:
        distance = abs(floor - position)
        if distance < FLOOR_EPSILON:
            continue
        if distance < nearest_distance:
            nearest = floor
            nearest_distance = distance
    if nearest is None:
        nearest = floors[0]

    return requests.build_target_for_floor(nearest, direction_between(position, nearest))
