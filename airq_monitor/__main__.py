"""CLI entry point for the air-quality monitor.

Usage::

    airq-monitor watch --host 192.168.1.50
    airq-monitor watch --config monitor.yaml --format json --duration 60
    airq-monitor read --host 192.168.1.50
    airq-monitor fan auto --host 192.168.1.50
    airq-monitor buzzer off
    airq-monitor list-parameters
    airq-monitor init-config --output monitor.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import textwrap
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from airq_monitor.config import MonitorConfig
    from airq_monitor.dashboard import Dashboard
    from airq_monitor.models import Reading

# ---------------------------------------------------------------------------
# Sample YAML config template for init-config
# ---------------------------------------------------------------------------
_SAMPLE_CONFIG = """\
# Air-quality monitor configuration
# The AIRQ_DEVICE_HOST environment variable overrides device.host.

device:
  host: 192.168.1.50                  # device IP / host name, or a full http:// URL
  timeout_s: 5.0                      # per-request timeout for every device call

monitor:
  poll_interval_s: 10                 # seconds between sensor fetches
  history_capacity: 50                # readings kept for the chart
  parameter: CO2                      # CO2, Ammonia, NO2, Benzene, Temperature, Humidity
  # log_level: INFO                   # DEBUG, INFO, WARNING, ERROR
"""

_ACTIONS = ["on", "off", "auto"]


# ======================================================================
# Main entry point
# ======================================================================


def main(argv: list[str] | None = None) -> None:
    epilog = textwrap.dedent("""\
        examples:
          airq-monitor watch --host 192.168.1.50
          airq-monitor watch --config monitor.yaml --format json --duration 60
          airq-monitor read --host 192.168.1.50
          airq-monitor fan auto --host 192.168.1.50
          airq-monitor list-parameters
          airq-monitor init-config --output monitor.yaml
    """)

    parser = argparse.ArgumentParser(
        prog="airq-monitor",
        description="Poll an air-quality sensor device and control its fan and buzzer.",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", title="commands")

    # Options shared by every command that talks to the device
    device_opts = argparse.ArgumentParser(add_help=False)
    device_opts.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML config file.",
    )
    device_opts.add_argument(
        "--host",
        type=str,
        default=None,
        help="Device host or URL (overrides config and AIRQ_DEVICE_HOST).",
    )
    device_opts.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 5.0).",
    )
    device_opts.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )

    # -- watch -------------------------------------------------------------
    watch_parser = subparsers.add_parser(
        "watch",
        parents=[device_opts],
        help="Poll the device and print a line per reading.",
    )
    watch_parser.add_argument(
        "--interval",
        "-n",
        type=float,
        default=None,
        help="Seconds between fetches (default: 10).",
    )
    watch_parser.add_argument(
        "--duration",
        "-d",
        type=float,
        default=None,
        help="Run duration in seconds (default: indefinite, Ctrl-C to stop).",
    )
    watch_parser.add_argument(
        "--format",
        type=str,
        default="text",
        choices=["text", "json"],
        help="Output format (default: text).",
    )
    watch_parser.add_argument(
        "--parameter",
        "-p",
        type=str,
        default=None,
        help="Parameter summarised on exit (default: CO2).",
    )

    # -- read --------------------------------------------------------------
    subparsers.add_parser(
        "read",
        parents=[device_opts],
        help="Fetch one reading and print the detailed view.",
    )

    # -- fan / buzzer ------------------------------------------------------
    for peripheral in ("fan", "buzzer"):
        p = subparsers.add_parser(
            peripheral,
            parents=[device_opts],
            help=f"Turn the {peripheral} on, off, or to auto mode.",
        )
        p.add_argument("action", choices=_ACTIONS, help="Command to send.")

    # -- list-parameters ---------------------------------------------------
    subparsers.add_parser(
        "list-parameters",
        help="List the measurements reported by the device.",
    )

    # -- init-config -------------------------------------------------------
    init_parser = subparsers.add_parser(
        "init-config",
        help="Generate a sample YAML configuration file.",
    )
    init_parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write config to this file instead of stdout.",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    # -- Dispatch ----------------------------------------------------------
    if args.command == "watch":
        _cmd_watch(args)
    elif args.command == "read":
        _cmd_read(args)
    elif args.command in ("fan", "buzzer"):
        _cmd_control(args)
    elif args.command == "list-parameters":
        _cmd_list_parameters()
    elif args.command == "init-config":
        _cmd_init_config(args.output)
    else:
        parser.print_help()


# ======================================================================
# Command implementations
# ======================================================================


def _build_config(args: argparse.Namespace) -> MonitorConfig:
    """Resolve config file, environment and command-line overrides."""
    from airq_monitor.config import load_config

    cfg = load_config(args.config)
    overrides: dict[str, object] = {}
    if args.host:
        overrides["device_host"] = args.host
    if args.timeout is not None:
        overrides["timeout_s"] = args.timeout
    if args.log_level:
        overrides["log_level"] = args.log_level
    if getattr(args, "interval", None) is not None:
        overrides["poll_interval_s"] = args.interval
    if getattr(args, "parameter", None):
        from airq_monitor.parameters import parse_parameter

        overrides["parameter"] = parse_parameter(args.parameter)
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(name)-26s %(levelname)-7s %(message)s",
        datefmt="%H:%M:%S",
    )
    return cfg


# -- watch -----------------------------------------------------------------


def _cmd_watch(args: argparse.Namespace) -> None:
    """Poll until Ctrl-C or --duration, printing each reading."""
    from airq_monitor.console import ConsoleView
    from airq_monitor.dashboard import Dashboard

    cfg = _build_config(args)
    dash = Dashboard(cfg)
    view = ConsoleView(fmt=args.format)
    view.attach(dash.history)

    dash.acquisition.run(duration_s=args.duration)

    if args.format == "text":
        print(view.render_series(dash.series()))
        stats = dash.stats
        print(f"{stats.successes} readings, {stats.failure_count} failed fetches")


# -- read ------------------------------------------------------------------


async def _read_once(dash: Dashboard) -> Reading | None:
    await dash.start(poll=False)
    try:
        return await dash.refresh()
    finally:
        await dash.close()


def _cmd_read(args: argparse.Namespace) -> None:
    from airq_monitor.console import ConsoleView
    from airq_monitor.dashboard import Dashboard

    dash = Dashboard(_build_config(args))
    reading = asyncio.run(_read_once(dash))
    if reading is None:
        print(f"Error: no reading from {dash.config.base_url} ({dash.stats.last_error})")
        sys.exit(1)
    print(ConsoleView.render_details(reading))


# -- fan / buzzer ----------------------------------------------------------


async def _send_once(dash: Dashboard, peripheral: str, action: str) -> bool:
    await dash.start(poll=False)
    try:
        if peripheral == "fan":
            return await dash.set_fan_state(action)
        return await dash.set_buzzer_state(action)
    finally:
        await dash.close()


def _cmd_control(args: argparse.Namespace) -> None:
    from airq_monitor.dashboard import Dashboard

    dash = Dashboard(_build_config(args))
    if not asyncio.run(_send_once(dash, args.command, args.action)):
        print(f"Error: {args.command} did not accept '{args.action}'")
        sys.exit(1)
    print(f"{args.command.capitalize()} set to {args.action}")


# -- list-parameters -------------------------------------------------------


def _cmd_list_parameters() -> None:
    from airq_monitor.parameters import PARAMETERS

    print(f"\n{'Parameter':<14} {'Unit':<6} {'Description'}")
    print("-" * 48)
    for param, info in PARAMETERS.items():
        print(f"{param.value:<14} {info.unit:<6} {info.description}")
    print()


# -- init-config -----------------------------------------------------------


def _cmd_init_config(output_path: str | None) -> None:
    if output_path:
        from pathlib import Path

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        Path(output_path).write_text(_SAMPLE_CONFIG)
        print(f"Sample config written to {output_path}")
    else:
        print(_SAMPLE_CONFIG)


# ======================================================================
if __name__ == "__main__":
    main()
