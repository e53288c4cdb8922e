#!/usr/bin/env python3
"""Run the fuel station simulation from the command line.

Every option defaults to the matching ``FUELSTATION_*`` environment
variable, falling back to the library defaults.

Usage
-----
::

    python scripts/run_station.py
    python scripts/run_station.py --capacity 3 --initial-fuel 500 --seed 7

Options::

    --initial-fuel N          Fuel in the pool at opening
    --capacity N              Admission slots
    --closing-timeout-ms N    Time budget before the station closes
    --spawn-interval MIN MAX  Arrival interval bounds (ms)
    --service-delay MIN MAX   Service time bounds (ms)
    --consumption MIN MAX     Fuel request bounds
    --seed N                  Seed for the random source
    --json                    Print the final report as JSON
    --verbose                 Debug logging
    --pause                   Wait for Enter before exiting
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fuelstation import GasStation, StationConfig, StationConfigError  # noqa: E402
from fuelstation.random_source import default_source  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate a capacity-limited fuel station.")
    parser.add_argument("--initial-fuel", type=int)
    parser.add_argument("--capacity", type=int)
    parser.add_argument("--closing-timeout-ms", type=int)
    parser.add_argument("--spawn-interval", type=int, nargs=2, metavar=("MIN", "MAX"))
    parser.add_argument("--service-delay", type=int, nargs=2, metavar=("MIN", "MAX"))
    parser.add_argument("--consumption", type=int, nargs=2, metavar=("MIN", "MAX"))
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--json", action="store_true", help="Print the final report as JSON")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--pause", action="store_true", help="Wait for Enter before exiting")
    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.initial_fuel is not None:
        overrides["initial_fuel"] = args.initial_fuel
    if args.capacity is not None:
        overrides["capacity"] = args.capacity
    if args.closing_timeout_ms is not None:
        overrides["closing_timeout_ms"] = args.closing_timeout_ms
    if args.spawn_interval is not None:
        overrides["spawn_interval_min_ms"], overrides["spawn_interval_max_ms"] = args.spawn_interval
    if args.service_delay is not None:
        overrides["service_delay_min_ms"], overrides["service_delay_max_ms"] = args.service_delay
    if args.consumption is not None:
        overrides["consumption_min"], overrides["consumption_max"] = args.consumption
    return overrides


async def _run(config: StationConfig, seed: int | None) -> Any:
    station = GasStation(config, rng=default_source(seed))
    return await station.run()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s" if not args.verbose else "%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = StationConfig.from_env(**_overrides(args))
    except StationConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    report = asyncio.run(_run(config, args.seed))

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        counts = ", ".join(f"{outcome.value}={count}" for outcome, count in sorted(report.outcome_counts().items()))
        reason = report.closing_reason.value if report.closing_reason else "-"
        print(f"Closed by {reason}; dispensed {report.fuel_dispensed}/{report.initial_fuel}; {counts or 'no vehicles'}")

    if args.pause:
        input("Press Enter to exit...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
