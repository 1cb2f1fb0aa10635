"""Path, URL, progress-bar and file helpers."""

from __future__ import annotations

import os
import posixpath
import sys
from urllib.parse import urlsplit


def current_dir(*args: str) -> str:
    """Return the directory of the running program joined with ``args``."""
    directory = os.path.abspath(os.path.dirname(sys.argv[0]))
    directory = directory.replace("\\", "/")
    return os.path.normpath(os.path.join(directory, *args))


def resolve_url(base: str, path: str) -> str:
    """Resolve a playlist reference ``path`` against the playlist URL ``base``."""
    if path.startswith(("https://", "http://")):
        return path
    if path.startswith("/"):
        parts = urlsplit(base)
        host = parts.netloc.rpartition("@")[2]
        base_url = f"{parts.scheme}://{host}"
    else:
        cut = base.rfind("/")
        if cut < 0:
            raise ValueError(f"cannot resolve {path!r} against {base!r}")
        base_url = base[:cut]
    return base_url + posixpath.normpath("/" + path.lstrip("/"))


def format_progress_bar(prefix: str, proportion: float, width: int, *args: str) -> str:
    """Render a one-line progress bar."""
    filled = int(proportion * width)
    padding = " " * abs(width - filled)
    suffix = "".join(args)
    return f"[{prefix}] {'■' * filled}{padding} {proportion * 100:6.2f}% {suffix}"


def draw_progress_bar(prefix: str, proportion: float, width: int, *args: str) -> None:
    """Redraw the progress bar in place on standard output."""
    print("\r" + format_progress_bar(prefix, proportion, width, *args), end="", flush=True)


def read_lines(path: str | os.PathLike[str]) -> list[str]:
    """Return the non-empty lines of a text file."""
    with open(path, encoding="utf-8", newline="") as handle:
        lines = []
        for raw in handle:
            line = raw[:-1] if raw.endswith("\n") else raw
            if line.endswith("\r"):
                line = line[:-1]
            if line:
                lines.append(line)
    return lines