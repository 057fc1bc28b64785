"""Command line entry point for pymemmap."""

import argparse
import dataclasses
import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from pymemmap.app import MemmapApp, format_kib
from pymemmap.config import DEFAULT_PROC_ROOT, Settings
from pymemmap.errors import MemmapError
from pymemmap.identity import ensure_alive, resolve_pid
from pymemmap.models import SIZE_COUNTER, Process, printable
from pymemmap.ranking import rank_regions
from pymemmap.snapshot import ProcfsSource, take_snapshot

logger = logging.getLogger(__name__)

PROG = "pymemmap"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Show where a process's memory goes, per mapping.",
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("-p", "--pid", type=int, help="process id to inspect")
    target.add_argument("-n", "--name", help="inspect the lowest pid with this process name")
    parser.add_argument("-c", "--counter", help="smaps counter to rank by (default: Rss)")
    parser.add_argument("-t", "--top", type=int, metavar="N", help="number of mappings to list")
    parser.add_argument(
        "--maps",
        action="store_true",
        help="read /proc/<pid>/maps (no counters; ranks by Size)",
    )
    parser.add_argument("--report", action="store_true", help="print a text report instead of the TUI")
    parser.add_argument("--proc-root", help="procfs mount point (default: /proc)")
    parser.add_argument("--log-file", help="write log messages to this file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log level for --log-file (default: INFO)",
    )
    return parser


def settings_from_args(args: argparse.Namespace, base: Settings) -> Settings:
    """Apply command line overrides on top of the environment settings."""
    overrides: dict[str, object] = {}
    if args.proc_root:
        overrides["proc_root"] = args.proc_root
    if args.maps:
        overrides["detailed"] = False
        overrides["counter"] = SIZE_COUNTER
    if args.counter:
        overrides["counter"] = args.counter
    if args.top is not None:
        overrides["top_n"] = args.top
    return dataclasses.replace(base, **overrides)


def configure_logging(log_file: str | None, level: str) -> None:
    """Log to a file when asked; the TUI owns the terminal otherwise."""
    if log_file is None:
        return
    handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    package_logger = logging.getLogger("pymemmap")
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level))


def print_report(process: Process, settings: Settings, out: TextIO) -> None:
    """Print the ranking as a plain text table."""
    ranking = rank_regions(process.regions, settings.counter, settings.top_n)
    templ = "%-60s %12s %7s %8s"

    print(f"PID {process.pid}: {process.cmd_line}", file=out)
    print(templ % ("Mapping", ranking.counter, "Share", "Regions"), file=out)
    for group in ranking.groups:
        print(
            templ
            % (
                printable(group.label)[:60],
                format_kib(group.value),
                f"{group.ratio * 100:.1f}%",
                group.regions,
            ),
            file=out,
        )
    if ranking.truncated:
        other = ranking.group_count - len(ranking.groups)
        print(templ % (f"[other: {other} mappings]", format_kib(ranking.remainder), "", ""), file=out)
    print("-" * 90, file=out)
    print(
        templ % ("Total", format_kib(ranking.total), "", len(process.regions)),
        file=out,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the pymemmap command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    try:
        settings = settings_from_args(args, Settings.from_env())
    except ValueError as exc:
        parser.error(str(exc))
    if settings.top_n < 0:
        parser.error("--top must not be negative")

    try:
        if args.name is not None:
            pid = resolve_pid(args.name)
        else:
            pid = args.pid
        # A custom procfs root holds saved copies, not live processes.
        if settings.proc_root == DEFAULT_PROC_ROOT:
            logger.debug("Inspecting pid %d (%s)", pid, ensure_alive(pid))

        source = ProcfsSource(settings.proc_root, detailed=settings.detailed)
        process = take_snapshot(pid, source)
    except MemmapError as exc:
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return 1

    if args.report:
        print_report(process, settings, sys.stdout)
        return 0

    MemmapApp(process, counter=settings.counter, top_n=settings.top_n).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
