from __future__ import annotations

from typing import Optional

from .interface import Direction, Target, TargetSelector
from .requests import RequestBook
from .utils import nearest_target


class NearestTargetSelector:
    """Always heads for the closest pending floor, ignoring travel direction."""

    def choose_next_target(
        self,
        requests: RequestBook,
        position: float,
        direction: Direction,
        capacity_available: bool = True,
    ) -> Optional[Target]:
        if not requests.has_any_requests():
            return None
        return nearest_target(requests, position, capacity_available)
