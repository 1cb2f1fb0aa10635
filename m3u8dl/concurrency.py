"""Run a callable over many tasks with a bounded number of threads."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

T = TypeVar("T")

DEFAULT_CONCURRENCY = 20


def run_concurrently(
    func: Callable[[T], Any],
    tasks: Iterable[T],
    concurrency: int = 0,
) -> list[tuple[T, Exception]]:
    """Call ``func`` on every task, at most ``concurrency`` at a time.

    Failures are reported on standard output and returned as
    ``(task, exception)`` pairs in task order. A non-positive
    ``concurrency`` falls back to the default limit.
    """
    limit = concurrency if concurrency > 0 else DEFAULT_CONCURRENCY

    def run_one(task: T) -> Exception | None:
        try:
            func(task)
        except Exception as exc:
            print(f"c.DoTask failed {exc}")
            return exc
        return None

    with ThreadPoolExecutor(max_workers=limit) as pool:
        pending = [(task, pool.submit(run_one, task)) for task in tasks]
    return [(task, future.result()) for task, future in pending if future.result() is not None]