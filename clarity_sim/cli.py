"""Command line entry point for the Clarity simulator."""

import argparse
import json
import logging
import sys
import time
from typing import List, Optional

from .analytics import aggregate, same_day_stats
from .core import ContractViolation, RandomVariate, utc_now
from .filtration import DEFAULT_DEVICE_ID, DEFAULT_FILTER_ID, FilterLifeModel
from .pipeline import MonitorSession
from .telemetry import HistoricalSeriesBuilder, ReadingGenerator
from .utils import (
    ConfigError,
    get_config_value,
    load_config,
    load_default_config,
    log_filter_state,
    log_statistics,
    merge_configs,
    save_series,
    setup_logging,
    validate_config,
)

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="clarity-sim",
        description="Synthetic water quality telemetry simulator",
    )
    p.add_argument("--config", help="YAML config merged over the packaged defaults")
    p.add_argument("--seed", type=int, help="seed for reproducible output")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")

    sub = p.add_subparsers(dest="command", required=True)

    history = sub.add_parser("history", help="build a history series and print its summary")
    history.add_argument("--days", type=int, help="look-back length in days")
    history.add_argument(
        "--window",
        choices=["day", "week", "month", "today"],
        default="month",
        help="rollup window ('today' = same calendar day)",
    )
    history.add_argument("--output", help="save the series as JSON")

    filt = sub.add_parser("filter", help="print a filter state")
    filt.add_argument("--days-ago", type=int, help="days since installation")

    live = sub.add_parser("live", help="run a live session and print appended readings")
    live.add_argument("--duration", type=float, default=10.0, help="seconds to run")
    live.add_argument("--interval", type=float, help="seconds between live readings")

    return p


def _load(args: argparse.Namespace) -> dict:
    config = load_default_config()
    if args.config:
        config = merge_configs(config, load_config(args.config))

    overrides = {}
    if args.seed is not None:
        overrides["simulation"] = {"seed": args.seed}
    if args.log_level:
        overrides["logging"] = {"level": args.log_level}
    if getattr(args, "interval", None) is not None:
        overrides["live"] = {"interval_seconds": args.interval, "startup_delay_seconds": 0}
    if overrides:
        config = merge_configs(config, overrides)

    validate_config(config)
    return config


def _run_history(args, config) -> int:
    variate = RandomVariate(seed=get_config_value(config, "simulation.seed"))
    builder = HistoricalSeriesBuilder(ReadingGenerator(variate), variate)

    days = args.days if args.days is not None else get_config_value(config, "simulation.history_days", 30)
    now = utc_now()
    series = builder.build(days, now)

    if args.window == "today":
        summary = same_day_stats(series, now)
    else:
        summary = aggregate(series, args.window, now)

    if args.output:
        save_series(series, args.output)

    log_statistics(summary.to_dict())
    print(json.dumps(summary.to_dict(), indent=2))
    return 0


def _run_filter(args, config) -> int:
    model = FilterLifeModel(
        filter_id=get_config_value(config, "filter.filter_id", DEFAULT_FILTER_ID),
        device_id=get_config_value(config, "filter.device_id", DEFAULT_DEVICE_ID),
    )
    days = args.days_ago if args.days_ago is not None else get_config_value(config, "filter.install_days_ago", 45)
    state = model.compute(days)
    log_filter_state(state)
    print(json.dumps(state.to_dict(), indent=2))
    return 0


def _run_live(args, config) -> int:
    session = MonitorSession(config)
    printed = 0
    deadline = time.monotonic() + args.duration

    with session:
        session.wait_until_ready(timeout=args.duration)
        while time.monotonic() < deadline:
            readings = session.readings
            if printed == 0 and readings:
                printed = len(readings) - 1
            for reading in readings[printed:]:
                print(json.dumps(reading.to_dict()))
            printed = len(readings)
            time.sleep(min(0.5, max(0.0, deadline - time.monotonic())))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        config = _load(args)
    except ConfigError as e:
        print(f"config error: {e}", file=sys.stderr)
        return 2

    setup_logging(
        log_dir=get_config_value(config, "logging.log_dir", "logs"),
        level=get_config_value(config, "logging.level", "INFO"),
        console_output=get_config_value(config, "logging.console_output", True),
        file_output=get_config_value(config, "logging.file_output", False),
    )

    commands = {
        "history": _run_history,
        "filter": _run_filter,
        "live": _run_live,
    }
    try:
        return commands[args.command](args, config)
    except ContractViolation as e:
        logger.error(f"Invalid input: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
