from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .interface import CabinTarget, Direction, HallTarget, Target
from .utils import is_above, is_below


def is_valid_call(floor: int, direction: Direction, total_floors: int) -> bool:
    """Hall calls cannot point out of the building."""
    if direction == Direction.UP:
        return floor < total_floors
    if direction == Direction.DOWN:
        return floor > 1
    return False


@dataclass
class RequestBook:
    """The three pending request collections of a single car."""

    cabin_requests: Set[int] = field(default_factory=set)
    up_calls: Set[int] = field(default_factory=set)
    down_calls: Set[int] = field(default_factory=set)

    def call_set(self, direction: Direction) -> Set[int]:
        if direction == Direction.UP:
            return self.up_calls
        if direction == Direction.DOWN:
            return self.down_calls
        raise ValueError("Hall calls need an up or down direction")

    def add_cabin_request(self, floor: int) -> bool:
        if floor in self.cabin_requests:
            return False
        self.cabin_requests.add(floor)
        return True

    def add_hall_call(self, floor: int, direction: Direction) -> bool:
        calls = self.call_set(direction)
        if floor in calls:
            return False
        calls.add(floor)
        return True

    def has_any_requests(self) -> bool:
        return bool(self.cabin_requests or self.up_calls or self.down_calls)

    def has_request_at(self, floor: int) -> bool:
        return floor in self.cabin_requests or floor in self.up_calls or floor in self.down_calls

    def has_requests_beyond(self, floor: float, direction: Direction) -> bool:
        """True if cabin or same-direction calls remain strictly past ``floor``."""
        if direction == Direction.UP:
            return any(is_above(level, floor) for level in self.cabin_requests | self.up_calls)
        if direction == Direction.DOWN:
            return any(is_below(level, floor) for level in self.cabin_requests | self.down_calls)
        return False

    def floors(self) -> List[int]:
        return sorted(self.cabin_requests | self.up_calls | self.down_calls)

    def clear_floor(self, floor: int) -> None:
        self.cabin_requests.discard(floor)
        self.up_calls.discard(floor)
        self.down_calls.discard(floor)

    def clear(self) -> None:
        self.cabin_requests.clear()
        self.up_calls.clear()
        self.down_calls.clear()

    def update(self, other: "RequestBook") -> None:
        self.cabin_requests |= other.cabin_requests
        self.up_calls |= other.up_calls
        self.down_calls |= other.down_calls

    def without_hall_calls(self) -> "RequestBook":
        return RequestBook(cabin_requests=set(self.cabin_requests))

    def copy(self) -> "RequestBook":
        return RequestBook(
            cabin_requests=set(self.cabin_requests),
            up_calls=set(self.up_calls),
            down_calls=set(self.down_calls),
        )

    def build_target_for_floor(
        self, floor: int, preferred: Direction = Direction.IDLE
    ) -> Optional[Target]:
        """Resolve the pending requests at ``floor`` into a single target.

        A cabin request always wins. Between hall calls the one matching the
        preferred direction wins, defaulting to the up call.
        """

        has_up = floor in self.up_calls
        has_down = floor in self.down_calls
        if floor in self.cabin_requests:
            return CabinTarget(floor)
        if not has_up and not has_down:
            return None
        if preferred == Direction.DOWN:
            return HallTarget(floor, Direction.DOWN if has_down else Direction.UP)
        return HallTarget(floor, Direction.UP if has_up else Direction.DOWN)

    def as_dict(self) -> Dict[str, List[int]]:
        return {
            "cabin": sorted(self.cabin_requests),
            "up": sorted(self.up_calls),
            "down": sorted(self.down_calls),
        }
