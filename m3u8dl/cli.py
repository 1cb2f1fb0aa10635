"""Command line entry point: download an M3U8 stream into a single TS file."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from .downloader import new_task

_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_WORDS = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value {text!r}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="m3u8", description="Download an M3U8 stream and merge its segments."
    )
    parser.add_argument("-u", dest="url", default="", help="M3U8 URL, required")
    parser.add_argument(
        "-c", dest="concurrency", type=int, default=5, help="Maximum number of occurrences"
    )
    parser.add_argument("-o", dest="output", default="", help="Output folder, required")
    parser.add_argument(
        "-C",
        dest="continue_flag",
        type=_parse_bool,
        nargs="?",
        const=True,
        default=True,
        help="continue download",
    )
    parser.add_argument(
        "-m", dest="max_tries", type=int, default=-1, help="Maximum number of try"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, download the stream and merge it; always returns 0."""
    args = _build_parser().parse_args(argv)

    if not args.url:
        print("[error]", "parameter 'u' is required")
        return 0
    if not args.output:
        print("[error]", "parameter 'o' is required")
        return 0
    if args.concurrency <= 0:
        print("parameter 'c' must be greater than 0")
        return 0
    max_tries = args.max_tries if args.max_tries > 0 else -1

    try:
        downloader = new_task(args.output, args.url)
    except Exception as exc:
        print(exc)
        return 0

    if downloader.exists():
        print(f"*****{downloader.file_name}****exists")
        return 0

    try:
        downloader.start(args.concurrency, args.continue_flag, max_tries)
    except Exception as exc:
        print(exc)
        return 0
    print("Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())