from __future__ import annotations

from typing import Optional

from .interface import Direction, Target, TargetSelector
from .requests import RequestBook
from .utils import floors_above, floors_below, nearest_target


class LookTargetSelector:
    """Destination-only LOOK ordering for cars without passenger capacity.

    Opposite-direction calls ahead of the car are served from the farthest
    one inward, so the car reaches the end of its sweep before reversing.
    Capacity is ignored.
    """

    def choose_next_target(
        self,
        requests: RequestBook,
        position: float,
        direction: Direction,
        capacity_available: bool = True,
    ) -> Optional[Target]:
        if not requests.has_any_requests():
            return None
        if direction == Direction.IDLE:
            return nearest_target(requests, position)

        up_service = requests.cabin_requests | requests.up_calls
        down_service = requests.cabin_requests | requests.down_calls

        if direction == Direction.UP:
            candidates = (
                (floors_above(up_service, position), 0, Direction.UP),
                (floors_above(requests.down_calls, position), -1, Direction.DOWN),
                (floors_below(down_service, position), -1, Direction.DOWN),
                (floors_below(requests.up_calls, position), -1, Direction.UP),
            )
        else:
            candidates = (
                (floors_below(down_service, position), -1, Direction.DOWN),
                (floors_below(requests.up_calls, position), 0, Direction.UP),
                (floors_above(up_service, position), 0, Direction.UP),
                (floors_above(requests.down_calls, position), 0, Direction.DOWN),
            )

        for floors, index, preferred in candidates:
            if floors:
                return requests.build_target_for_floor(floors[index], preferred)
        return None
