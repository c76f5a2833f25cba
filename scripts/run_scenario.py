"""CLI for running offline single-car scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from simulation import Building, CarConfig, Simulation


def build_simulation(config: Dict) -> Simulation:
    building_cfg = config.get("building", {})
    car_config = CarConfig(**building_cfg)

    selector_cfg = config.get("selector", {})
    building = Building(config=car_config, selector_name=selector_cfg.get("name", "scan"))

    return Simulation(
        building=building,
        random_seed=config.get("random_seed"),
        spawn_passengers=config.get("spawn_passengers", True),
        metrics_hook_interval_ms=config.get("metrics_hook_interval_ms", 1000),
    )


def _apply_scheduled_events(
    simulation: Simulation, events: Iterable[Dict], window_start: int, window_end: int
) -> None:
    building = simulation.building
    for event in events:
        at = event.get("time_ms", 0)
        if not window_start <= at < window_end:
            continue
        kind = event.get("type")
        if kind == "cabin":
            building.submit_cabin_request(event["floor"])
        elif kind == "hall":
            building.submit_hall_call(event["floor"], event["direction"])
        elif kind == "passenger" and not building.at_passenger_cap():
            building.add_passenger(event["origin"], event["destination"])


def run_simulation(simulation: Simulation, config: Dict) -> List[Dict]:
    duration = config.get("duration_ms", 60_000)
    step_ms = config.get("step_ms", 100)
    events = config.get("events", [])
    snapshots: List[Dict] = []

    simulation.on_event("metrics", lambda payload: snapshots.append(asdict(payload["metrics"])))
    elapsed = 0
    while elapsed < duration:
        _apply_scheduled_events(simulation, events, elapsed, elapsed + step_ms)
        simulation.step(step_ms)
        elapsed += step_ms
    return snapshots


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write metrics snapshots as JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log dispatch decisions")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = json.loads(args.config.read_text())
    simulation = build_simulation(config)
    snapshots = run_simulation(simulation, config)

    final_metrics = asdict(simulation.metrics.snapshot(simulation.current_time))
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration_ms": config.get("duration_ms", 60_000),
        "selector": simulation.building.selector_name,
        "final_metrics": final_metrics,
        "final_state": simulation.building.snapshot(),
        "metrics_over_time": snapshots,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Selector: {results['selector']}")
    print(f"Duration: {results['duration_ms']} ms")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if args.output:
        print(f"Saved metrics to {args.output}")


if __name__ == "__main__":
    main()
