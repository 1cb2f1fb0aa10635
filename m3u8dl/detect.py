"""Command line tool that checks which playlist URLs in a file are usable."""

from __future__ import annotations

import argparse
import threading
from collections.abc import Iterable, Sequence

from .concurrency import run_concurrently
from .resolver import from_url
from .util import read_lines

DEFAULT_CONCURRENCY = 200


def check_url(url: str) -> int:
    """Resolve ``url`` as a playlist and return its number of segments."""
    if not isinstance(url, str):
        raise TypeError("type error")
    try:
        result = from_url(url)
    except Exception as exc:
        raise RuntimeError(f"{url},error={exc}") from exc
    count = len(result.playlist.segments)
    print(f"[ok/{count}] {url}")
    return count


def detect(urls: Iterable[str], concurrency: int = DEFAULT_CONCURRENCY) -> list[str]:
    """Check ``urls`` concurrently; return the usable ones in completion order."""
    usable: list[str] = []
    lock = threading.Lock()

    def task(url: str) -> None:
        check_url(url)
        with lock:
            usable.append(url)

    run_concurrently(task, urls, concurrency)
    return usable


def main(argv: Sequence[str] | None = None) -> int:
    """Read URLs from the file given by ``-f`` and print the usable ones."""
    parser = argparse.ArgumentParser(
        prog="m3u8-detect", description="Check which M3U8 URLs can be resolved."
    )
    parser.add_argument("-f", dest="file", default="", help="M3U8 URL files, required")
    args = parser.parse_args(argv)

    if not args.file:
        print("[error]:parameter 'f' is required", end="")
        return 0
    try:
        urls = read_lines(args.file)
    except OSError as exc:
        print(f"[error]:{exc}", end="")
        return 0

    usable = detect(urls, DEFAULT_CONCURRENCY)
    print("-------")
    for url in usable:
        print(url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())