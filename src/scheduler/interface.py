from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Optional, Protocol, Union

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .requests import RequestBook


class Direction(IntEnum):
    """Travel or call direction; the value is the sign of floor movement."""

    DOWN = -1
    IDLE = 0
    UP = 1

    @property
    def label(self) -> str:
        return {Direction.UP: "up", Direction.DOWN: "down", Direction.IDLE: "idle"}[self]

    @classmethod
    def parse(cls, value: Union[str, int, "Direction"]) -> "Direction":
        if isinstance(value, str):
            lookup = {"up": cls.UP, "down": cls.DOWN, "idle": cls.IDLE, "none": cls.IDLE}
            try:
                return lookup[value.lower()]
            except KeyError:
                raise ValueError(f"Unknown direction '{value}'") from None
        return cls(value)


@dataclass(frozen=True)
class CabinTarget:
    """Stop requested by a rider already inside the car."""

    floor: int

    source = "cabin"

    @property
    def call_direction(self) -> Direction:
        return Direction.IDLE


@dataclass(frozen=True)
class HallTarget:
    """Stop for a directional pickup call made from a floor."""

    floor: int
    direction: Direction

    source = "hall"

    @property
    def call_direction(self) -> Direction:
        return self.direction


Target = Union[CabinTarget, HallTarget]


class TargetSelector(Protocol):
    """Strategy interface for picking the next floor a car should service."""

    def choose_next_target(
        self,
        requests: "RequestBook",
        position: float,
        direction: Direction,
        capacity_available: bool = True,
    ) -> Optional[Target]:
        """
        Return the next target to service, or ``None`` when nothing is pending.

        Implementations must only return floors that currently hold at least
        one pending request.
        """
        ...
