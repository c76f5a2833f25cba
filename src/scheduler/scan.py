from __future__ import annotations

from typing import Optional

from .interface import Direction, Target, TargetSelector
from .requests import RequestBook
from .utils import floors_above, floors_below, nearest_target


class ScanTargetSelector:
    """Implements a capacity-aware SCAN (elevator algorithm) for one car.

    The car keeps serving requests in its direction of travel, then sweeps
    the opposite calls on the way back. When the car is full, hall calls are
    hidden so it never stops solely for a pickup.
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
            return nearest_target(requests, position, capacity_available)

        visible = requests if capacity_available else requests.without_hall_calls()
        up_service = visible.cabin_requests | visible.up_calls
        down_service = visible.cabin_requests | visible.down_calls

        if direction == Direction.UP:
            ahead = floors_above(up_service, position)
            if ahead:
                return requests.build_target_for_floor(ahead[0], Direction.UP)
            # Nothing left going up: turn around and take the closest stop below
            behind = floors_below(down_service, position)
            if behind:
                return requests.build_target_for_floor(behind[-1], Direction.DOWN)
            deferred = floors_above(visible.down_calls, position)
            if deferred:
                return requests.build_target_for_floor(deferred[0], Direction.DOWN)
            return nearest_target(requests, position, capacity_available)

        ahead = floors_below(down_service, position)
        if ahead:
            return requests.build_target_for_floor(ahead[-1], Direction.DOWN)
        behind = floors_above(up_service, position)
        if behind:
            return requests.build_target_for_floor(behind[0], Direction.UP)
        deferred = floors_below(visible.up_calls, position)
        if deferred:
            return requests.build_target_for_floor(deferred[-1], Direction.UP)
        return nearest_target(requests, position, capacity_available)
