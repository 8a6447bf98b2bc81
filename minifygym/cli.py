"""CLI entry point for minifygym: find the smallest minified output for a file."""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from minifygym import __version__
from minifygym.common import FailurePolicy
from minifygym.config import settings, setup_logging
from minifygym.engines import list_measurers, list_minifiers
from minifygym.errors import MinifyGymError
from minifygym.report import format_time, print_results, results_to_dict
from minifygym.schema import MinifyRequest
from minifygym.workflow import run_optimal_minify

logger = logging.getLogger("minifygym.cli")


def _split_names(values: Optional[List[str]]) -> Optional[List[str]]:
    """Flatten repeated comma-separated name options."""
    if values is None:
        return None
    names = []
    for value in values:
        names.extend(part.strip() for part in value.split(",") if part.strip())
    return names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minifygym",
        description="Try every minifier, option and pass combination and keep the smallest output.",
        epilog="Code can also be piped on stdin: echo 'some code' | minifygym",
    )
    parser.add_argument("file", nargs="?", help="File to minify (default: read stdin)")
    parser.add_argument(
        "-m",
        "--minifiers",
        action="append",
        metavar="MIN,MIN",
        help=f"Minifiers to use. Default: {', '.join(settings.default_minifiers)}. "
        f"Valid: {', '.join(list_minifiers())}",
    )
    parser.add_argument(
        "-c",
        "--compressors",
        action="append",
        metavar="COMP,COMP",
        help=f"Compressors to measure with. Default: {', '.join(settings.default_measurements)}. "
        f"Valid: {', '.join(list_measurers())}",
    )
    parser.add_argument(
        "-p",
        "--passes",
        type=int,
        default=None,
        help=f"Passes to try for each minifier. Default: {settings.default_passes}",
    )
    parser.add_argument("-o", "--output", help="Write the best output to FILE instead of stdout")
    parser.add_argument(
        "--no-output",
        dest="no_output",
        action="store_true",
        help="Do not print or write the best output. Implies --verbose",
    )
    parser.add_argument("-v", "--version", action="version", version=f"minifygym v{__version__}")
    parser.add_argument("-V", "--verbose", action="store_true", help="Log ranked results to stderr")
    parser.add_argument(
        "--comments",
        default=None,
        help=f"Comment retention policy shared by all runs. Default: {settings.default_comments}",
    )
    parser.add_argument(
        "--config",
        help="JSON, YAML or Python file to load runs from, instead of the options above",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Rank the runs that succeeded instead of failing when any run fails",
    )
    parser.add_argument("--json", action="store_true", help="Print all results as JSON")
    return parser


def read_code(file: Optional[str]) -> Optional[str]:
    if file:
        return Path(file).read_text(encoding="utf-8")
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return None


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    verbose = args.verbose or args.no_output
    setup_logging("cli", level="INFO" if verbose else "WARNING")

    def log(message: str) -> None:
        if verbose:
            print(message, file=sys.stderr)

    try:
        code = read_code(args.file)
    except OSError as e:
        print(f"Failed to read {args.file}: {e}", file=sys.stderr)
        return 1

    if code is None:
        print("You must pass a file or pipe code to be minified!", file=sys.stderr)
        return 1

    request = MinifyRequest(
        code=code,
        runs_file=args.config,
        minifiers=_split_names(args.minifiers),
        measurements=_split_names(args.compressors),
        passes=args.passes,
        comments=args.comments,
        failure_policy=FailurePolicy.LENIENT if args.lenient else None,
    )

    start_time = time.perf_counter()
    try:
        results = run_optimal_minify(request)
    except MinifyGymError as e:
        print(f"Error [{e.error_code.value}]: {e}", file=sys.stderr)
        return 1

    if args.output and not args.no_output:
        Path(args.output).write_text(results.winner.code, encoding="utf-8")
        logger.info(f"Wrote best output to {args.output}")

    if args.json:
        json.dump(results_to_dict(results), sys.stdout, indent=2)
        sys.stdout.write("\n")
    elif not args.output and not args.no_output:
        print(results.winner.code)

    print_results(log, results)
    log(f"Finished in: {format_time(time.perf_counter() - start_time)}s")
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
