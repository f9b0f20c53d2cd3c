"""Command-line front end: submit one benchmark and show the results.

Wires the pipeline end to end:

    BenchmarkApiClient → BenchmarkOrchestrator → ResultPresenter
                                                   ├── ConsoleTableSink
                                                   └── MatplotlibChartSink

The library list is fetched from the backend first. Without
``--library``, every catalog library is selected (the web form's
default of all boxes checked).

Configuration:
    The backend URL comes from ``--base-url``, else the
    ``PARSEINSIGHT_BASE_URL`` environment variable (a ``.env`` file
    in the working directory is loaded), else
    ``http://localhost:8080``.

Usage:
    python -m scripts.run_benchmark --list-libraries
    python -m scripts.run_benchmark --message-file request.http
    python -m scripts.run_benchmark --message-file resp.http \\
        --message-type response --iterations 50000 --concurrency 4 \\
        --library net/http --library fasthttp
    python -m scripts.run_benchmark --message-file request.http --json

Output:
    Results table to stdout (stderr with ``--json``, which prints the
    presented results as JSON to stdout instead). Charts are saved as
    ``throughput.png`` and ``latency.png`` under ``--chart-dir``.
    Exit code 0 on success, 1 on rejected input or failure.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from core.models import MessageType
from core.orchestrator import (
    DEFAULT_CONCURRENCY,
    DEFAULT_ITERATIONS,
    BenchmarkOrchestrator,
    SubmissionOutcome,
)
from core.presenter import ResultPresenter
from infra.api_client import ApiClientConfig, BenchmarkApiClient
from infra.charts import MatplotlibChartSink
from infra.console import ConsoleStatusSink, ConsoleTableSink

logger: logging.Logger = logging.getLogger(__name__)

BASE_URL_ENV: str = "PARSEINSIGHT_BASE_URL"
DEFAULT_BASE_URL: str = "http://localhost:8080"


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Benchmark HTTP message parsers and compare the results",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--message",
        type=str,
        help="Raw HTTP message to parse",
    )
    source.add_argument(
        "--message-file",
        type=Path,
        help="File containing the raw HTTP message",
    )
    parser.add_argument(
        "--message-type",
        choices=[t.value for t in MessageType],
        default=None,
        help="Message kind (default: detected by the backend)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=DEFAULT_ITERATIONS,
        help=f"Parse iterations per library (default: {DEFAULT_ITERATIONS})",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f"Concurrent workers per library (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--library",
        action="append",
        dest="libraries",
        default=None,
        help="Parser library to include; repeatable (default: all)",
    )
    parser.add_argument(
        "--list-libraries",
        action="store_true",
        help="Print the available parser libraries and exit",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help=f"Backend URL (default: ${BASE_URL_ENV} or {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--chart-dir",
        type=Path,
        default=Path("charts"),
        help="Directory for chart PNGs (default: ./charts)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print presented results as JSON to stdout",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def _read_message(args: argparse.Namespace) -> str:
    if args.message_file is not None:
        return args.message_file.read_text(encoding="utf-8")
    return args.message or ""


def main(argv: list[str] | None = None) -> int:
    """Run one benchmark from the command line. Returns the exit code."""
    load_dotenv()

    args: argparse.Namespace = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    base_url: str = (
        args.base_url or os.environ.get(BASE_URL_ENV) or DEFAULT_BASE_URL
    )
    try:
        config: ApiClientConfig = ApiClientConfig(base_url=base_url)
    except ValidationError as exc:
        logger.error("Invalid backend URL %r: %s", base_url, exc)
        return 1

    try:
        message: str = _read_message(args)
    except OSError as exc:
        logger.error("Cannot read message file: %s", exc)
        return 1

    with BenchmarkApiClient(config=config) as api:
        presenter: ResultPresenter = ResultPresenter(
            table_sink=ConsoleTableSink(
                stream=sys.stderr if args.json else sys.stdout,
            ),
            chart_sink=MatplotlibChartSink(output_dir=args.chart_dir),
        )
        orchestrator: BenchmarkOrchestrator = BenchmarkOrchestrator(
            backend=api,
            presenter=presenter,
            status_sink=ConsoleStatusSink(),
        )

        available: list[str] = orchestrator.load_libraries()
        if args.list_libraries:
            for name in available:
                print(name)
            return 0 if available else 1

        outcome: SubmissionOutcome = orchestrator.submit(
            message=message,
            libraries=args.libraries or available,
            message_type=args.message_type,
            iterations=args.iterations,
            concurrency=args.concurrency,
        )
        presenter.clear_charts()

    if not outcome.succeeded or outcome.presented is None:
        return 1

    if args.json:
        print(outcome.presented.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
