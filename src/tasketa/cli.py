"""Command line interface for TaskETA."""

import argparse
import asyncio
import logging
import sys
from typing import Optional, TextIO

from tasketa.config import settings
from tasketa.engine import COMPLETION_NOTICE, TaskEtaError, build_progress_input, evaluate, normalize
from tasketa.models import RefreshState, RefreshUpdate
from tasketa.tasks import RefreshController
from tasketa.utils.time import now_millis

logger = logging.getLogger("tasketa.cli")


def _read_input(path: Optional[str]) -> str:
    """Read status text from a file, or stdin for ``-`` / no path."""
    if not path or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def cmd_normalize(args: argparse.Namespace, out: TextIO) -> int:
    out.write(normalize(_read_input(args.file)) + "\n")
    return 0


def cmd_estimate(args: argparse.Namespace, out: TextIO) -> int:
    try:
        data = build_progress_input(_read_input(args.file))
        _, report, complete = evaluate(data, now_millis())
    except TaskEtaError as e:
        sys.stderr.write(e.message + "\n")
        return 1

    out.write(report.title + "\n\n")
    out.write(report.text + "\n")
    if complete:
        out.write(COMPLETION_NOTICE + "\n")
    return 0


async def _watch(text: str, interval: float, out: TextIO) -> RefreshState:
    def display(update: RefreshUpdate) -> None:
        if update.report is not None:
            out.write(f"[{update.report.title}]\n")
        out.write(update.text + "\n\n")
        out.flush()

    controller = RefreshController(display, interval_seconds=interval)
    try:
        await controller.start(text)
        return await controller.wait()
    finally:
        await controller.stop()


def cmd_watch(args: argparse.Namespace, out: TextIO) -> int:
    text = _read_input(args.file)
    try:
        state = asyncio.run(_watch(text, args.interval, out))
    except KeyboardInterrupt:
        logger.info("Watch interrupted")
        return 130
    return 1 if state is RefreshState.FAILED else 0


def cmd_serve(args: argparse.Namespace, out: TextIO) -> int:
    from tasketa.main import main as serve

    serve()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tasketa",
        description="Estimate remaining time of long-running search cluster tasks",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    normalize_parser = subparsers.add_parser(
        "normalize", help="Print the pasted status as strict JSON"
    )
    normalize_parser.add_argument("file", nargs="?", help="Status file (default: stdin)")
    normalize_parser.set_defaults(func=cmd_normalize)

    estimate_parser = subparsers.add_parser("estimate", help="Print one estimate and exit")
    estimate_parser.add_argument("file", nargs="?", help="Status file (default: stdin)")
    estimate_parser.set_defaults(func=cmd_estimate)

    watch_parser = subparsers.add_parser(
        "watch", help="Refresh the estimate until the task is estimated complete"
    )
    watch_parser.add_argument("file", nargs="?", help="Status file (default: stdin)")
    watch_parser.add_argument(
        "--interval",
        type=_positive_float,
        default=settings.refresh_interval_seconds,
        help=f"Refresh interval in seconds (default: {settings.refresh_interval_seconds})",
    )
    watch_parser.set_defaults(func=cmd_watch)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)
    return args.func(args, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
