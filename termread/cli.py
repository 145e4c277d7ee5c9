"""Command-line entry point: ``termread <url>``."""

from __future__ import annotations

import argparse
import logging
import sys

from .errors import ConversionError, ExtractionError, FetchError
from .fetch import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .pipeline import ReaderOptions, read_url
from .resolve import DEFAULT_JOBS

logger = logging.getLogger("termread.cli")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termread",
        description="A command line web reader: shows the readable part of a page, images included, in the terminal.",
    )
    parser.add_argument("url", help="Page to read")
    parser.add_argument(
        "-i",
        "--no-images",
        action="store_true",
        help="disable image rendering",
    )
    parser.add_argument(
        "-a",
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="set custom user agent string",
    )
    parser.add_argument(
        "-w",
        "--width",
        type=_positive_int,
        default=None,
        help="output width in columns (default: terminal width, or 80)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="per-request timeout in seconds",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=_positive_int,
        default=DEFAULT_JOBS,
        help="number of images fetched at the same time",
    )
    parser.add_argument(
        "-b",
        "--browser",
        action="store_true",
        help="load the page in headless Chromium (for script-built pages)",
    )
    parser.add_argument(
        "-m",
        "--markdown",
        action="store_true",
        help="print the extracted Markdown instead of rendering it",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging on stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )
    logger.debug("reading %s", args.url)

    options = ReaderOptions(
        no_images=args.no_images,
        user_agent=args.user_agent,
        width=args.width,
        timeout=args.timeout,
        jobs=args.jobs,
        browser=args.browser,
        markdown_only=args.markdown,
    )
    try:
        output = read_url(args.url, options)
    except (FetchError, ExtractionError, ConversionError) as exc:
        print(exc, file=sys.stderr)
        return 1

    sys.stdout.write(output)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
