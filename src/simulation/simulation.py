from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from .building import Building
from .clock import TimerHandle
from .passenger import Passenger

logger = logging.getLogger(__name__)


@dataclass
class MetricsSnapshot:
    time_ms: int
    average_wait: float
    wait_p95: float
    average_ride: float
    ride_p95: float
    throughput: int


class MetricsTracker:
    def __init__(self) -> None:
        self.wait_times: List[int] = []
        self.ride_times: List[int] = []
        self.throughput: int = 0

    def record_wait_time(self, passenger: Passenger) -> None:
        if passenger.wait_time is not None:
            self.wait_times.append(passenger.wait_time)

    def record_ride_time(self, passenger: Passenger) -> None:
        if passenger.ride_time is not None:
            self.ride_times.append(passenger.ride_time)
            self.throughput += 1

    def _average(self, values: List[int]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[int], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        d0 = sorted_vals[int(f)] * (c - k)
        d1 = sorted_vals[int(c)] * (k - f)
        return float(d0 + d1)

    def snapshot(self, time_ms: int) -> MetricsSnapshot:
        return MetricsSnapshot(
            time_ms=time_ms,
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            average_ride=self._average(self.ride_times),
            ride_p95=self._percentile(self.ride_times, 0.95),
            throughput=self.throughput,
        )


class Simulation:
    """Time-stepped single-car simulation with random passenger traffic."""

    def __init__(
        self,
        building: Building,
        random_seed: Optional[int] = None,
        spawn_passengers: bool = True,
        metrics_hook_interval_ms: int = 1000,
    ) -> None:
        self.building = building
        self.random = random.Random(random_seed)
        self.spawn_passengers = spawn_passengers
        self.metrics = MetricsTracker()
        self.metrics_hook_interval_ms = max(1, metrics_hook_interval_ms)
        self._spawn_handle: Optional[TimerHandle] = None
        self._next_metrics_at = 0
        self._started = False

        building.on_event("board", self.metrics.record_wait_time)
        building.on_event("alight", self.metrics.record_ride_time)
        building.on_event("removed", lambda _: self._schedule_spawn_if_needed())

    @property
    def current_time(self) -> int:
        return self.building.clock.now

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        if self.spawn_passengers:
            for _ in range(self.building.config.warm_up_passengers):
                self._spawn()
            self._schedule_spawn_if_needed()
        self.building.coordinator.dispatch_next_move()

    def run(self, duration_ms: int, step_ms: int = 100) -> None:
        elapsed = 0
        while elapsed < duration_ms:
            dt = min(step_ms, duration_ms - elapsed)
            self.step(dt)
            elapsed += dt

    def step(self, dt_ms: int) -> None:
        self.start()
        self.building.clock.advance(dt_ms)
        if self.current_time >= self._next_metrics_at:
            self._emit_metrics()
            self._next_metrics_at = self.current_time + self.metrics_hook_interval_ms

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.building.on_event(event, callback)

    def spawn_passenger_batch(self, origin: int, count: int, destination: Optional[int] = None) -> int:
        """Queue up to ``count`` passengers at ``origin``; stops at the passenger cap."""
        spawned = 0
        for _ in range(count):
            if self.building.at_passenger_cap():
                logger.info("Passenger cap reached after %s spawns at floor %s", spawned, origin)
                break
            target = destination
            if target is None:
                target = self.random.choice([f for f in self.building.floors if f != origin])
            self.building.add_passenger(origin, target)
            spawned += 1
        return spawned

    def _spawn(self) -> Optional[Passenger]:
        passenger = self.building.spawn_passenger(self.random)
        if passenger is None:
            logger.info("Passenger cap reached, skipping spawn at %s ms", self.current_time)
        return passenger

    def _schedule_spawn_if_needed(self) -> None:
        if not self.spawn_passengers or self._spawn_handle is not None:
            return
        if self.building.at_passenger_cap():
            return
        config = self.building.config
        delay = self.random.randint(config.spawn_min_ms, config.spawn_max_ms)
        self._spawn_handle = self.building.clock.call_later(delay, self._on_spawn_timer)

    def _on_spawn_timer(self) -> None:
        self._spawn_handle = None
        if not self.building.at_passenger_cap():
            self._spawn()
        self._schedule_spawn_if_needed()

    def _emit_metrics(self) -> None:
        snapshot = self.metrics.snapshot(self.current_time)
        self.building.emit("metrics", {"metrics": snapshot, "building": self.building.snapshot()})
