# src/gridcrawler/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from gridcrawler import __version__
from gridcrawler.errors import GridCrawlerError
from gridcrawler.utils.logger import setup_logger
from gridcrawler.utils.stamps import RunStamp, default_log_file

from gridcrawler.commands import search as cmd_search
from gridcrawler.commands import doctor as cmd_doctor


class _Parser(argparse.ArgumentParser):
    """Usage errors exit with 1 like every other validation failure."""

    def error(self, message: str):  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="gridcrawler",
        description="Search a grid of variant files for samples with bcftools (shell or sbatch).",
    )
    parser.add_argument("-v", "--version", action="version", version=f"gridcrawler {__version__}")

    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--dry-run", action="store_true", help="Print commands without executing them.")
    parent.add_argument("--verbose", action="store_true", help="Debug output on the console; xargs --verbose.")
    parent.add_argument("-l", "--log-file", type=Path, default=None,
                        help="Log file (default: gc_analysis/gc_log/<date>/gridcrawler_<timestamp>.log).")

    subparsers = parser.add_subparsers(dest="command", required=True)

    cmd_search.setup_parser(subparsers, parent)
    cmd_doctor.setup_parser(subparsers, parent)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    stamp = RunStamp.now()
    args.stamp = stamp

    try:
        logger = setup_logger(args.log_file or default_log_file(stamp), verbose=args.verbose)
    except OSError as e:
        print(f"error: could not open log file: {e}", file=sys.stderr)
        return 1
    logger.debug("Parsed args: %r", args)
    try:
        return int(args.func(args) or 0)
    except GridCrawlerError as e:
        logger.critical("%s", e)
        return 1
    except ValidationError as e:
        logger.critical("Invalid option(s): %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
