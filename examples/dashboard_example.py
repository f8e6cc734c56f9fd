#!/usr/bin/env python3
"""Dashboard example -- poll a device for a while, print every reading,
switch the fan to auto and summarise the charted series at the end.

Set ``AIRQ_DEVICE_HOST`` (or edit ``configs/monitor.yaml``) to point at your
device first.

Usage::

    python examples/dashboard_example.py
    python examples/dashboard_example.py --duration 60 --parameter NO2

Equivalent CLI::

    airq-monitor watch --config examples/configs/monitor.yaml --duration 30
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path


async def run(duration: float, parameter: str) -> None:
    from airq_monitor import Dashboard, load_config
    from airq_monitor.console import ConsoleView

    config_path = Path(__file__).parent / "configs" / "monitor.yaml"
    cfg = load_config(config_path)

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(name)-26s %(levelname)-7s %(message)s",
        datefmt="%H:%M:%S",
    )

    print(f"=== Dashboard example ({cfg.base_url}) ===\n")

    async with Dashboard(cfg) as dash:
        ConsoleView().attach(dash.history)
        dash.select_parameter(parameter)

        # Manual refresh runs alongside the periodic timer
        await dash.refresh()

        if await dash.set_fan_state("auto"):
            print("  Fan switched to auto mode")
        else:
            print("  Fan command failed (see log)")

        await asyncio.sleep(duration)

        status = dash.status()
        if status is not None:
            print(f"\n  Latest: {status.level.value} - {status.description}")
        print("  " + ConsoleView.render_series(dash.series()))
        print(f"  Fetch stats: {dash.stats.model_dump()}")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--duration", type=float, default=30.0, help="Seconds to poll (default: 30).")
    parser.add_argument("--parameter", default="CO2", help="Parameter to summarise (default: CO2).")
    args = parser.parse_args()
    asyncio.run(run(args.duration, args.parameter))


if __name__ == "__main__":
    main()
