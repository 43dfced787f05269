"""CLI for running LiftDispatch scenarios defined in JSON configs until quiescence."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from simulation import ElevatorState, ElevatorSystem, PickupRequest, SystemConfig


def build_system(config: Dict) -> ElevatorSystem:
    fleet_cfg = config.get("fleet")
    system_cfg = dict(config.get("system", {}))
    if fleet_cfg is None:
        return ElevatorSystem.from_config(SystemConfig.from_dict(system_cfg))

    elevators = [ElevatorState.of(e.get("floor", 0), e.get("stops", [])) for e in fleet_cfg]
    system_cfg.setdefault("capacity", len(elevators))
    return ElevatorSystem(elevators, config=SystemConfig.from_dict(system_cfg))


async def _submit_all(system: ElevatorSystem, requests: List[Dict]) -> None:
    for entry in requests:
        delay = entry.get("delay", 0)
        if delay:
            await asyncio.sleep(delay)
        await system.submit_request(PickupRequest(entry["origin"], entry["destination"]))


async def run_scenario(system: ElevatorSystem, config: Dict, timeout: float) -> List[Dict]:
    system.start()
    try:
        await asyncio.wait_for(_submit_all(system, config.get("requests", [])), timeout)
        fleet = await asyncio.wait_for(system.wait_until_quiescent(), timeout)
    finally:
        await system.stop()
    return [elevator.to_dict() for elevator in fleet]


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
        help="Optional file path to write the final fleet as JSON",
    )
    parser.add_argument("--timeout", type=float, default=60.0, help="Seconds to wait for quiescence")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = json.loads(args.config.read_text())
    system = build_system(config)
    final_fleet = asyncio.run(run_scenario(system, config, args.timeout))

    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "requests": len(config.get("requests", [])),
        "final_fleet": final_fleet,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Requests: {results['requests']}")
    print("Final fleet:")
    for index, elevator in enumerate(final_fleet):
        print(f"  {index}: floor {elevator['floor']}")
    if args.output:
        print(f"Saved final fleet to {args.output}")


if __name__ == "__main__":
    main()
