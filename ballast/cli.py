"""Command-line entry point: load, run, compare and snapshot."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from .compare import compare_tests
from .config import Config, ConfigError
from .printer import Printer
from .process import process
from .runner import Runner
from .snapshot import Snapshot, SnapshotError

CONFIG_PATH = Path("ballast.json")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ballast",
        description=(
            "A simple cli tool to run snapshot performance tests incrementally "
            "against local apis"
        ),
    )
    parser.add_argument(
        "--no-snapshot",
        action="store_true",
        help="do not save the results of this run as a new snapshot",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    printer = Printer()

    if not CONFIG_PATH.exists():
        printer.print_with_red("ERROR", "No ballast.json file found in current directory", 0)
        return 0

    try:
        config = Config.from_config_file(CONFIG_PATH)
    except ConfigError as exc:
        printer.print_with_red("ERROR", f"Failed to read ./ballast.json config file: {exc}", 0)
        return 1
    count = len(config.endpoints)
    printer.print_with_green("Loaded", f"config with {count} tests from ./ballast.json", 0)

    try:
        loads = asyncio.run(Runner(config).run(printer))
    except ValueError as exc:
        printer.print_with_red("ERROR", str(exc), 0)
        return 1

    try:
        latest = Snapshot.latest()
    except SnapshotError as exc:
        printer.print_with_red("ERROR", str(exc), 0)
        return 1

    printer.blank_line().print_with_yellow("Processing", f"{count} tests", 0)
    tests = process(loads, config, latest)
    printer.clear_previous().print_with_green("Processed", f"{count} tests", 0)

    compare_tests(tests, config, latest, printer)

    if not args.no_snapshot:
        try:
            Snapshot.create(tests).write()
        except SnapshotError as exc:
            printer.print_with_red("ERROR", str(exc), 0)
            return 1
        printer.blank_line().print_with_green(
            "Saved", f"snapshot with {len(tests)} tests to ./.ballast_snapshot.json", 0
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())