from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CarConfig:
    """Building size, car limits and phase timings (milliseconds)."""

    total_floors: int = 10
    capacity: int = 8
    max_total_passengers: int = 12
    start_floor: int = 1

    speed_floors_per_sec: float = 0.9
    min_trip_ms: int = 360
    frame_interval_ms: int = 16

    floor_dwell_ms: int = 460
    door_open_ms: int = 240
    door_close_ms: int = 240

    # Per-passenger stagger while the doors are open
    exit_stagger_ms: int = 100
    exit_duration_ms: int = 360
    board_stagger_ms: int = 120
    board_settle_ms: int = 300
    board_full_ms: int = 220
    board_blocked_ms: int = 200
    board_empty_ms: int = 160

    spawn_min_ms: int = 750
    spawn_max_ms: int = 1700
    warm_up_passengers: int = 5

    def validate(self) -> None:
        if self.total_floors < 2:
            raise ValueError("A building needs at least two floors")
        if not 1 <= self.start_floor <= self.total_floors:
            raise ValueError(f"Start floor {self.start_floor} is outside 1..{self.total_floors}")
        if self.capacity < 1:
            raise ValueError("Car capacity must be positive")
        if self.max_total_passengers < 1:
            raise ValueError("Passenger cap must be positive")
        if self.speed_floors_per_sec <= 0:
            raise ValueError("Car speed must be positive")
        if self.frame_interval_ms <= 0:
            raise ValueError("Frame interval must be positive")
        if self.spawn_min_ms > self.spawn_max_ms:
            raise ValueError("spawn_min_ms must not exceed spawn_max_ms")
