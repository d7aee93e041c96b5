#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Termustat Extractor Launcher
Converts a directory of Golestan faculty pages into JSON and SQL exports.
"""

import argparse
import sys

from termustat.core import config
from termustat.core.error_handler import install_exception_hook
from termustat.scrapers.batch import run
from termustat.scrapers.html_parser import LAYOUTS


def build_parser():
    parser = argparse.ArgumentParser(
        description="Extract course timetables from Golestan HTML pages.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  termustat-extract --input courses --output export
  termustat-extract --input pages --layout list --workers 8 --strict
        """
    )
    parser.add_argument(
        "-i", "--input",
        default=str(config.INPUT_DIR),
        help=f"Directory of <faculty>.html pages (default: {config.INPUT_DIR})"
    )
    parser.add_argument(
        "-o", "--output",
        default=str(config.OUTPUT_DIR),
        help=f"Directory for the JSON/SQL exports (default: {config.OUTPUT_DIR})"
    )
    parser.add_argument(
        "--layout",
        choices=sorted(LAYOUTS),
        default=config.ROW_LAYOUT,
        help=f"Table layout of the pages (default: {config.ROW_LAYOUT})"
    )
    parser.add_argument(
        "-w", "--workers",
        type=int,
        default=config.MAX_WORKERS,
        help=f"Number of files processed in parallel (default: {config.MAX_WORKERS})"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=config.STRICT_MODE,
        help="Skip a whole file when one of its slots or exam windows does not decode"
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    install_exception_hook()

    try:
        report = run(args.input, args.output, layout=args.layout,
                     max_workers=args.workers, strict=args.strict)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Exported {report.records} courses from {len(report.processed)} files to {args.output}")
    if report.skipped:
        print(f"Skipped {len(report.skipped)} files: {', '.join(report.skipped)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
