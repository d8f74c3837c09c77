#!/usr/bin/env python3
"""
calldist CLI module.

Provides the command-line interface for measuring call-stack-sensitive
distances between program positions.
"""

import argparse
import sys
from typing import List, Optional

from calldist.__version__ import __version__
from calldist.analysis.analyzer import DistanceAnalyzer
from calldist.cli.config_utils import apply_overrides, load_configuration
from calldist.logger import get_timestamp, info, setup_application_logging, warning
from calldist.output import ConsoleFormatter, JSONFormatter
from calldist.utils.fs_utils import is_program_description, is_python_file


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--program",
        required=True,
        help="Program to analyze (YAML/JSON description or Python source file)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--log-file",
        help="Path to log file for debug and analysis output",
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Disable colored console output"
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create the command-line argument parser.

    Returns:
        argparse.ArgumentParser: The argument parser
    """
    parser = argparse.ArgumentParser(
        prog="calldist",
        description="calldist - call-stack-sensitive instruction distance analysis",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    distance_parser = subparsers.add_parser(
        "distance", help="Measure the distance from start position(s) to a target"
    )
    _add_common_arguments(distance_parser)
    distance_parser.add_argument(
        "--start",
        action="append",
        required=True,
        help="Start position reference (repeatable), e.g. main:entry:0 or main@12",
    )
    distance_parser.add_argument(
        "--target", required=True, help="Target position reference"
    )
    distance_parser.add_argument(
        "--stack",
        action="append",
        default=[],
        help="Call position already active at the start, outermost first (repeatable)",
    )
    distance_parser.add_argument(
        "--config", help="Path to configuration file (JSON or YAML)"
    )
    distance_parser.add_argument("--max-distance", type=int, help="Override max_distance")
    distance_parser.add_argument(
        "--max-iterations", type=int, help="Override max_iterations"
    )
    distance_parser.add_argument(
        "--max-queue-length", type=int, help="Override max_queue_length"
    )
    distance_parser.add_argument(
        "--format",
        choices=["console", "json"],
        default="console",
        help="Output format (default: console)",
    )
    distance_parser.add_argument("--output", help="Path to output file")
    distance_parser.add_argument(
        "--pretty", action="store_true", help="Pretty-print JSON output"
    )

    list_parser = subparsers.add_parser(
        "list", help="List every position reference of a program"
    )
    _add_common_arguments(list_parser)

    return parser


def _check_program_path(path: str) -> None:
    if not (is_python_file(path) or is_program_description(path)):
        warning(f"[Args] Unrecognised program extension, reading {path} as YAML")


def run_distance(args: argparse.Namespace) -> int:
    """
    Run the distance queries described by the command line arguments.

    Returns:
        Exit code
    """
    info(f"[Start] calldist distance at {get_timestamp()}")
    info(f"[Args] Program: {args.program}")
    info(f"[Args] Starts: {args.start}  Target: {args.target}  Stack: {args.stack}")
    _check_program_path(args.program)

    settings = load_configuration(args.config)
    settings = apply_overrides(
        settings,
        {
            "max_distance": args.max_distance,
            "max_iterations": args.max_iterations,
            "max_queue_length": args.max_queue_length,
        },
    )

    analyzer = DistanceAnalyzer.from_file(args.program, settings)
    reports = analyzer.analyze_all(args.start, args.target, args.stack)

    if args.format == "json":
        JSONFormatter().write_results(reports, args.output, pretty=args.pretty)
    else:
        formatter = ConsoleFormatter(use_color=not args.no_color and not args.output)
        formatter.write_results(reports, args.output, show_stats=args.verbose)
    return 0


def run_list(args: argparse.Namespace) -> int:
    """Print every position reference of the program."""
    _check_program_path(args.program)
    analyzer = DistanceAnalyzer.from_file(args.program)
    formatter = ConsoleFormatter(use_color=not args.no_color)
    print(formatter.format_positions(analyzer.list_positions()))
    return 0


def cli_main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the calldist CLI.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_application_logging(
        log_file=args.log_file, verbose=args.verbose, debug=args.debug
    )

    if args.command == "distance":
        return run_distance(args)
    if args.command == "list":
        return run_list(args)
    return 0


if __name__ == "__main__":
    sys.exit(cli_main())
