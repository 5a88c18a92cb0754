"""Execution policies for batched status computation.

Statuses of different dates are independent once the history snapshot is
loaded, so a batch can run inline or on a worker pool. The caller picks.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Protocol, TypeVar

from ..config import BaseConfig

T = TypeVar("T")
R = TypeVar("R")


class ExecutionPolicy(Protocol):
    """Applies a function to every item and returns results in input order."""

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> list[R]:  # pragma: no cover - interface
        ...


class SynchronousExecution:
    """Run every item on the calling thread."""

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> list[R]:
        return [fn(item) for item in items]


class ThreadPoolExecution:
    """Fan items out to a short-lived thread pool."""

    def __init__(self, max_workers: int):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> list[R]:
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="habit-status"
        ) as pool:
            return list(pool.map(fn, items))


def execution_from_config(config: BaseConfig) -> ExecutionPolicy:
    """Return the policy selected by ``STATUS_WORKERS`` (0 means inline)."""

    if config.STATUS_WORKERS > 0:
        return ThreadPoolExecution(config.STATUS_WORKERS)
    return SynchronousExecution()


__all__ = [
    "ExecutionPolicy",
    "SynchronousExecution",
    "ThreadPoolExecution",
    "execution_from_config",
]
